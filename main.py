"""CLI entrypoint for the research paper bot."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

import chat_history
from config import paper_store_path
from errors import PaperBotError, user_message
from paper_store import CsvPaperStore
from pipeline import ask_paper, compare_selected, fetch_ranked, get_paper, search_papers


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Find, summarize and compare arXiv papers")
    parser.add_argument("--store", default=None, help="Paper store CSV path (default: PAPER_STORE_PATH)")
    parser.add_argument("--user", default=None, help="User id for chat history")
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="Fetch and rank papers without saving them")
    fetch.add_argument("topic")
    fetch.add_argument("--max-results", type=int, default=None)

    search = sub.add_parser("search", help="Fetch, save and summarize papers for a topic")
    search.add_argument("topic")
    search.add_argument("--max-results", type=int, default=None)
    search.add_argument(
        "--no-summarize",
        action="store_true",
        help="Save papers without generating AI summaries",
    )

    show = sub.add_parser("show", help="Print one saved paper")
    show.add_argument("paper_id")

    sub.add_parser("list", help="List saved papers")

    compare = sub.add_parser("compare", help="Compare two or more saved papers")
    compare.add_argument("paper_ids", nargs="+")

    ask = sub.add_parser("ask", help="Ask a question about a saved paper")
    ask.add_argument("paper_id")
    ask.add_argument("question")

    sub.add_parser("history", help="List chat sessions for --user")

    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    """Execute one command and print its result."""
    store = CsvPaperStore(args.store or paper_store_path())

    if args.command == "fetch":
        for result in fetch_ranked(args.topic, args.max_results):
            print(f"{result.external_id or '-'}\t{result.title}")
    elif args.command == "search":
        result = search_papers(
            args.topic,
            store=store,
            max_results=args.max_results,
            summarize=not args.no_summarize,
            user_id=args.user,
        )
        print(result.ai_response)
        print()
        for paper in result.papers:
            print(f"{paper.paper_id}\t{paper.title}")
    elif args.command == "show":
        paper = get_paper(args.paper_id, store=store)
        print(paper.title)
        print(", ".join(paper.authors))
        print(paper.source_url)
        print()
        print(paper.best_text())
    elif args.command == "list":
        for paper in store.all():
            print(f"{paper.paper_id}\t{paper.topic}\t{paper.title}")
    elif args.command == "compare":
        print(compare_selected(args.paper_ids, store=store).narrative)
    elif args.command == "ask":
        print(ask_paper(args.paper_id, args.question, store=store, user_id=args.user))
    elif args.command == "history":
        if not args.user:
            raise SystemExit("--user is required for history")
        for session in chat_history.sessions_for(args.user):
            print(f"{session['session_id']}\t{session['updated_at']}\t{session['title']}")


def main(argv: list[str] | None = None) -> None:
    """Initialize config and execute the requested command."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    try:
        run(args)
    except PaperBotError as exc:
        logging.error("%s failed: %s", args.command, exc)
        print(user_message(exc), file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
