#!/usr/bin/env python3
"""
Command line front end for the book endpoints.

Usage:
    books list [--author NAME] [--page N]
    books get ID
    books create --author A --name N --release-date 2020-01-01
    books update ID --author A --name N --release-date 2020-01-01
    books delete ID

The base URL comes from --base-url or BOOKS_API_URL (a .env file is read),
e.g. the FrontendURL output of the frontend stack.
"""

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

from lambdas.books.errors import BookError
from lambdas.books.models import Book
from books_app.client import BooksClient, paginate

logger = logging.getLogger(__name__)


def print_table(books: List[Book], page: int, page_count: int, total: int):
    """Print books the way the list view shows them."""
    print(f"Books ({total})")
    print(f"{'ID':<36}  {'Name':<30}  {'Author':<24}  Release Date")
    for book in books:
        print(f"{book.id or '':<36}  {book.name:<30}  {book.author:<24}  {book.releaseDate}")
    print(f"Page {page} of {page_count}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage books through the Books API")
    parser.add_argument(
        "--base-url",
        default=None,
        help="Distribution or local server URL (default: $BOOKS_API_URL)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List books")
    list_parser.add_argument("--author", help="Only books by this author")
    list_parser.add_argument("--page", type=int, default=1, help="Page to show (default: 1)")
    list_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    get_parser = subparsers.add_parser("get", help="Show one book")
    get_parser.add_argument("book_id")

    for name, help_text in [("create", "Create a book"), ("update", "Update a book")]:
        book_parser = subparsers.add_parser(name, help=help_text)
        if name == "update":
            book_parser.add_argument("book_id")
        book_parser.add_argument("--author", required=True)
        book_parser.add_argument("--name", required=True)
        book_parser.add_argument("--release-date", required=True, help="ISO date, e.g. 2020-01-01")

    delete_parser = subparsers.add_parser("delete", help="Delete a book")
    delete_parser.add_argument("book_id")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    base_url = args.base_url or os.getenv("BOOKS_API_URL")
    if not base_url:
        parser.error("--base-url or BOOKS_API_URL is required")

    client = BooksClient(base_url)

    try:
        if args.command == "list":
            books = client.get_books(args.author)
            if args.json:
                print(json.dumps([book.model_dump(exclude_none=True) for book in books], indent=2))
            else:
                page_books, page_count = paginate(books, args.page)
                print_table(page_books, args.page, page_count, len(books))

        elif args.command == "get":
            print(client.get_book(args.book_id).model_dump_json(indent=2))

        elif args.command in ("create", "update"):
            book = Book(
                id=getattr(args, "book_id", None),
                author=args.author,
                name=args.name,
                releaseDate=args.release_date,
            )
            print(client.save_book(book).model_dump_json(indent=2))

        elif args.command == "delete":
            client.delete_book(args.book_id)
            print(f"Deleted {args.book_id}")

    except (BookError, ValueError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
