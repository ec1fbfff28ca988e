"""Text Position Index — 버퍼의 커서 오프셋과 0 기반 라인 번호를 상호 변환한다."""
from typing import List, Tuple


class TextPositionIndex:
    """하나의 버퍼 스냅샷에 대한 라인 인덱스.

    잘못된 오프셋·라인 번호는 예외 대신 범위 내로 보정하거나 빈 결과를 반환한다.
    """

    def __init__(self, buffer: str):
        self.buffer = buffer or ''
        self._lines: List[str] = self.buffer.split('\n')

    @property
    def lines(self) -> List[str]:
        return self._lines

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_number_at(self, offset: int) -> int:
        """buffer[0:offset] 의 줄바꿈 수를 센다. offset 은 [0, len(buffer)] 로 보정된다."""
        offset = max(0, min(offset, len(self.buffer)))
        return self.buffer.count('\n', 0, offset)

    def line_bounds(self, line: int) -> Tuple[int, int]:
        """라인의 [start, end) 오프셋을 반환한다. end 는 줄바꿈 문자를 포함하지 않는다.

        라인 수를 넘는 라인이면 end 는 len(buffer) 이다.
        """
        line = max(0, line)
        # 첫 라인 앞의 가상 줄바꿈 위치 -1
        newlines = [-1]
        pos = self.buffer.find('\n')
        while pos != -1:
            newlines.append(pos)
            pos = self.buffer.find('\n', pos + 1)

        if line >= len(newlines):
            return len(self.buffer), len(self.buffer)

        start = newlines[line] + 1
        end = newlines[line + 1] if line + 1 < len(newlines) else len(self.buffer)
        return start, end

    def text_of_line(self, line: int) -> str:
        if line < 0 or line >= len(self._lines):
            return ''
        return self._lines[line]
