"""Match Scorer — 두 정규화 문자열의 유사도를 [0, 1] 범위로 계산한다.

매칭 전략:
  1. 완전 일치 → 1.0
  2. 포함 관계 → 짧은 쪽 길이 / 긴 쪽 길이
  3. 단어 겹침 (3자 이상 단어) → 일치 단어 수 / 두 단어 수 중 큰 값

3단계는 짧은 문자열의 단어 집합을 기준으로 순회하지만 분모는 최대 단어 수를
사용하므로 완전히 대칭이 아니다. 동점 판정에 영향을 주므로 그대로 유지한다.
"""
from typing import List


def _words(text: str) -> List[str]:
    return [w for w in text.split(' ') if len(w) > 2]


def word_overlap(a: str, b: str) -> float:
    """단어 단위 퍼지 겹침 비율 (전략 3)."""
    if not a or not b:
        return 0.0
    shorter, longer = (a, b) if len(a) < len(b) else (b, a)
    words_short = _words(shorter)
    words_long = _words(longer)
    if not words_short or not words_long:
        return 0.0

    matches = 0
    for word in dict.fromkeys(words_short):
        if any(w in word or word in w for w in words_long):
            matches += 1
    return matches / max(len(_words(a)), len(_words(b)))


def contains_ratio(a: str, b: str) -> float:
    """한쪽이 다른 쪽을 포함하면 길이 비율, 아니면 0 (전략 2)."""
    if not a or not b:
        return 0.0
    if a in b or b in a:
        return min(len(a), len(b)) / max(len(a), len(b))
    return 0.0


def score(a: str, b: str) -> float:
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    ratio = contains_ratio(a, b)
    if ratio:
        return ratio
    return word_overlap(a, b)


def is_accepted(value: float, threshold: float) -> bool:
    """임계값을 초과해야 매칭으로 인정한다. 미만이면 약한 추측 대신 no-match."""
    return value > threshold
