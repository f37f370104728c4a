"""
Plain-text rendition of a StoreReport.

Column layout follows the document renderer: long names are cut with
``...``, missing page counts print as ``N/A`` and prices as ``$x.xx``.
"""

from __future__ import annotations

from decimal import Decimal

from inventory_ingestion.services.report_service import StoreReport

BOOK_NAME_WIDTH = 25
BOOK_AUTHOR_WIDTH = 20
AUTHOR_NAME_WIDTH = 35


def truncate_text(text: str | None, max_length: int) -> str:
    if not text:
        return ""
    if len(text) > max_length:
        return text[: max_length - 3] + "..."
    return text


def format_price(price: Decimal) -> str:
    return f"${price:.2f}"


def render_text(report: StoreReport) -> str:
    lines: list[str] = []
    store = report.store

    lines.append(store.name)
    if store.address:
        lines.append(store.address)
    generated = report.generated_on
    lines.append(f"Report Generated: {generated:%B} {generated.day}, {generated.year}")
    lines.append("")

    lines.append("Top Priciest Books")
    if not report.top_books:
        lines.append("  No books available in inventory.")
    else:
        lines.append(
            f"  {'#':<3} {'Book Name':<{BOOK_NAME_WIDTH}} {'Author':<{BOOK_AUTHOR_WIDTH}} "
            f"{'Pages':>6} {'Price':>10} {'Copies':>7}"
        )
        for i, book in enumerate(report.top_books, 1):
            pages = str(book.pages) if book.pages else "N/A"
            lines.append(
                f"  {i:<3} {truncate_text(book.name, BOOK_NAME_WIDTH):<{BOOK_NAME_WIDTH}} "
                f"{truncate_text(book.author, BOOK_AUTHOR_WIDTH):<{BOOK_AUTHOR_WIDTH}} "
                f"{pages:>6} {format_price(book.price):>10} {book.copies:>7}"
            )
    lines.append("")

    lines.append("Top Prolific Authors")
    if not report.top_authors:
        lines.append("  No authors available in inventory.")
    else:
        lines.append(
            f"  {'#':<3} {'Author Name':<{AUTHOR_NAME_WIDTH}} {'Books Available':>15} "
            f"{'Total Copies':>13}"
        )
        for i, author in enumerate(report.top_authors, 1):
            lines.append(
                f"  {i:<3} {truncate_text(author.name, AUTHOR_NAME_WIDTH):<{AUTHOR_NAME_WIDTH}} "
                f"{author.book_count:>15} {author.total_copies:>13}"
            )

    return "\n".join(lines) + "\n"
