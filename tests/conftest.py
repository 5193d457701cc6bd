import pytest

from engine import EvaluationEngine
from snapshot import ContentSnapshot


def filler(count: int, word: str = "lorem") -> str:
    return " ".join([word] * count)


@pytest.fixture
def engine():
    return EvaluationEngine()


@pytest.fixture
def article():
    """A draft that scores on every criterion."""
    body = (
        "<h2>Coffee basics</h2>"
        f"<p>Coffee is brewed daily. {filler(40)}</p>"
        "<h2>Espresso and coffee</h2>"
        f"<p>{filler(30)} espresso latte coffee.</p>"
        "<h3>Tools</h3>"
        '<p>See <a href="https://example.com/beans">beans</a> and <a href="/blog/grinders">grinders</a>.</p>'
        '<img src="/img/cup.png" alt="coffee cup">'
    )
    return ContentSnapshot(
        title="Coffee: The Ultimate Complete Guide",
        metaTitle="Best Coffee Guide",
        metaDescription="Everything about coffee, from beans to brewing.",
        urlSlug="best-coffee-guide",
        primaryKeyword="coffee",
        secondaryKeywords=["espresso", "latte"],
        content=body,
        toc=[],
        images=[],
        internalLinks=[],
        externalLinks=[],
        language="en",
        targetCountry="US",
    )
