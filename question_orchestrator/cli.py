"""Command-line entry point for generating questions and explanations.

Examples:
    question-orchestrator generate --topic Forces --difficulty "Form 2" --count 5
    question-orchestrator explain --question "What is inertia?" --answer "Resistance to change in motion"

Exit codes:
    0 - Success
    1 - All providers failed
    2 - Invalid arguments
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from .config import settings
from .logging_config import setup_logging
from .orchestrator import QuestionOrchestrator

EXIT_SUCCESS = 0
EXIT_ALL_PROVIDERS_FAILED = 1
EXIT_INVALID_ARGUMENTS = 2


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="question-orchestrator",
        description="Generate multiple-choice physics questions with LLM failover",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a question batch")
    generate.add_argument("--topic", required=True, help="Syllabus topic")
    generate.add_argument("--difficulty", required=True, help="Difficulty label")
    generate.add_argument(
        "--count", type=int, default=5, help="Number of questions (default: 5)"
    )
    generate.add_argument(
        "--privileged",
        action="store_true",
        help="Order providers as for a signed-in user",
    )
    generate.add_argument(
        "--author-id",
        default=None,
        help="Author id stamped on the questions (default: anonymous)",
    )

    explain = subparsers.add_parser("explain", help="Explain a correct answer")
    explain.add_argument("--question", required=True, help="Question text")
    explain.add_argument("--answer", required=True, help="Correct answer text")

    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """Execute the requested command and print its result to stdout."""
    author_id = getattr(args, "author_id", None)
    async with QuestionOrchestrator(author_lookup=lambda: author_id) as orchestrator:
        if args.command == "generate":
            questions = await orchestrator.generate_questions(
                topic=args.topic,
                difficulty=args.difficulty,
                count=args.count,
                is_privileged=args.privileged,
            )
            if questions is None:
                print("All providers failed; no questions generated.", file=sys.stderr)
                return EXIT_ALL_PROVIDERS_FAILED
            payload = [q.model_dump(by_alias=True) for q in questions]
            print(json.dumps(payload, indent=2, ensure_ascii=False))
            return EXIT_SUCCESS

        explanation = await orchestrator.get_explanation(args.question, args.answer)
        print(explanation)
        return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)

    setup_logging(
        log_level="DEBUG" if args.verbose else settings.log_level,
        log_file=args.log_file or settings.log_file,
        json_output=settings.log_json or settings.env == "production",
    )
    logger = logging.getLogger(__name__)

    if args.command == "generate" and args.count < 1:
        logger.error(f"--count must be positive, got {args.count}")
        return EXIT_INVALID_ARGUMENTS

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
