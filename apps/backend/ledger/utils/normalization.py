"""
정규화 유틸리티 함수

계좌명, 카테고리명 등 사람이 입력한 라벨을 저장 전에 정리합니다.
이체 카테고리는 계좌명을 그대로 조인 키로 쓰므로, 같은 이름이
공백 차이만으로 다른 값이 되지 않도록 합니다.
"""

import re
import unicodedata


def clean_label(value: str | None) -> str:
    """
    라벨 정리

    - NFKC 정규화 (한글 자모 통일)
    - 앞뒤 공백 제거
    - 연속 공백을 하나로

    Example:
        >>> clean_label("  신한   은행 ")
        "신한 은행"
    """
    if not value:
        return ""
    normalized = unicodedata.normalize("NFKC", value)
    normalized = normalized.strip()
    return re.sub(r"\s+", " ", normalized)


def clean_optional_label(value: str | None) -> str | None:
    """빈 문자열은 None으로 취급"""
    cleaned = clean_label(value)
    return cleaned or None
