import pytest

from app.slug import generate_slug


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Getting Started with NestJS", "getting-started-with-nestjs"),
        ("  Hello   World!! ", "hello-world"),
        ("10 Must-Visit Places in 2024", "10-must-visit-places-in-2024"),
        ("Healthy Meal -- Prep", "healthy-meal-prep"),
        ("--Leading and trailing--", "leading-and-trailing"),
        ("Café & Crème", "caf-crme"),
    ],
)
def test_generate_slug(text, expected):
    assert generate_slug(text) == expected


def test_generate_slug_without_alphanumerics_is_empty():
    assert generate_slug("!!! ???") == ""
    assert generate_slug("") == ""


@pytest.mark.parametrize("text", ["Hello World", "  A -- b  C ", "Python 3.12 Release!", "x"])
def test_generate_slug_is_idempotent(text):
    once = generate_slug(text)
    assert generate_slug(once) == once
