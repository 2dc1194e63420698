from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Optional

from app.core.errors import StudyAidError
from app.modules.study.generator import StudyGenerator
from app.modules.study.models.requests import GenerationRequest, Operation
from app.modules.study.session import (
    JsonFileSessionStore,
    StudySession,
    ViewMode,
)


def _load_text(args: argparse.Namespace, *, required: bool = True) -> Optional[str]:
    if args.text and args.text_file:
        raise SystemExit("Provide either --text or --text-file, not both")
    if args.text_file:
        return Path(args.text_file).read_text(encoding="utf-8")
    if args.text:
        return args.text
    if required:
        raise SystemExit("--text or --text-file is required")
    return None


def _add_text_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--text", "-t", help="Source text")
    p.add_argument("--text-file", help="Path to a file containing the source text")


def _print_json(data: dict) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run_study(
    session: StudySession,
    *,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Interactive loop: f flip, r right, w wrong, q quit."""

    def ask(prompt: str) -> str:
        # End of input or Ctrl-C quits like "q"
        try:
            return read(prompt).strip().lower()
        except (EOFError, KeyboardInterrupt):
            return "q"

    while True:
        if session.view is ViewMode.SUMMARY:
            write(
                f"\nDone: {len(session.right)} right, {len(session.wrong)} wrong "
                f"out of {len(session.deck)}."
            )
            choice = ask("[a] restart all  [o] wrong only  [q] quit > ")
            if choice == "a":
                session.restart_all()
            elif choice == "o" and session.wrong:
                session.restart_wrong_only()
            elif choice == "q":
                return
            continue

        card = session.current
        if card is None:
            return
        write(f"\n[{session.index + 1}/{len(session.deck)}] ({card.difficulty.value})")
        write(f"A: {card.answer}" if session.flipped else f"Q: {card.question}")
        choice = ask("[f] flip  [r] right  [w] wrong  [q] quit > ")
        if choice == "f":
            session.flip()
        elif choice == "r":
            session.mark_right()
        elif choice == "w":
            session.mark_wrong()
        elif choice == "q":
            return


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="study-aid", description="Study aid generator CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("summarize", help="Summarize text into key points")
    _add_text_args(s)

    f = sub.add_parser("flashcards", help="Generate flashcards from text")
    _add_text_args(f)
    f.add_argument("--count", "-n", type=int, help="Exact number of cards")

    fm = sub.add_parser("formulas", help="Extract formulas as markdown")
    _add_text_args(fm)

    sub.add_parser("fact", help="Fetch one random educative fact")

    st = sub.add_parser(
        "study",
        help="Study flashcards generated from text, or resume the saved session",
    )
    _add_text_args(st)
    st.add_argument("--count", "-n", type=int, help="Exact number of cards")
    st.add_argument("--session-file", help="Where the session is saved")

    args = parser.parse_args(argv)
    svc = StudyGenerator()

    try:
        if args.cmd == "summarize":
            result = svc.generate_sync(
                GenerationRequest(operation=Operation.SUMMARIZE, input_text=_load_text(args))
            )
            _print_json(result.model_dump(mode="json"))
            return 0
        if args.cmd == "flashcards":
            result = svc.generate_sync(
                GenerationRequest(
                    operation=Operation.FLASHCARDS,
                    input_text=_load_text(args),
                    desired_count=args.count,
                )
            )
            _print_json(result.model_dump(mode="json"))
            return 0
        if args.cmd == "formulas":
            result = svc.generate_sync(
                GenerationRequest(operation=Operation.FORMULAS, input_text=_load_text(args))
            )
            print(result.text)
            return 0
        if args.cmd == "fact":
            result = svc.generate_sync(GenerationRequest(operation=Operation.FACT))
            print(result.text)
            return 0
        if args.cmd == "study":
            store = JsonFileSessionStore(
                Path(args.session_file) if args.session_file else None
            )
            text = _load_text(args, required=False)
            if text is not None:
                result = svc.generate_sync(
                    GenerationRequest(
                        operation=Operation.FLASHCARDS,
                        input_text=text,
                        desired_count=args.count,
                    )
                )
                session = StudySession.start(result.flashcards, store=store)
            else:
                session = store.load()
                if session is None:
                    print("No saved session; pass --text or --text-file", file=sys.stderr)
                    return 1
            run_study(session)
            return 0
    except StudyAidError as e:
        print(json.dumps(e.to_payload(), indent=2, ensure_ascii=False), file=sys.stderr)
        return 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
