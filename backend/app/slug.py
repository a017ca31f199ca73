# backend/app/slug.py
import re

_DISALLOWED = re.compile(r"[^a-z0-9 -]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(text: str) -> str:
    """
    제목/이름을 URL에 쓸 수 있는 slug로 변환합니다.

    "Getting Started with NestJS" -> "getting-started-with-nestjs"

    영문 소문자, 숫자, 공백, 하이픈 외의 문자는 모두 제거되므로
    영숫자가 하나도 없는 입력은 빈 문자열이 됩니다.
    """
    slug = _DISALLOWED.sub("", text.lower())
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("- ")
