"""
Command-line front end of the calculator.

Commands:
- calc: validate two operands, send one calculation and print the outcome
- history: load the calculation history once and print it
- interactive: read "A OP B" lines and keep one calculator across submissions

The exit status is 1 when the last calculation or the history load failed.
"""

import argparse
import asyncio
from typing import Callable, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, ValidationError

from remote_calculator.client.client import CalculationClient, CalculationService
from remote_calculator.common.logger import logger
from remote_calculator.common.operations import OPERATORS, Operation
from remote_calculator.common.validator import InputField
from remote_calculator.controller.calculator import CalculationController, Success
from remote_calculator.controller.history import HistoryFailure, HistoryLoader

PROMPT = "calc> "
USAGE_HINT = "Type 'A OP B' (OP is one of + - * /), 'history' or 'quit'"


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    command : str
        Sub-command to run.
    first, second : str
        Raw operand text for ``calc``; validated later by the calculator itself.
    operation : Operation
        Operation applied by ``calc``.
    base_url : str
        Optional override of the configured service address.
    """

    command: Literal["calc", "history", "interactive"]
    first: str = ""
    second: str = ""
    operation: Operation = Operation.ADD
    base_url: Optional[str] = Field(default=None, pattern=r"^https?://")


def parse_args(argv: Optional[Sequence[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(description="Calculator backed by a remote calculation service")
    parser.add_argument("--base-url", help="Address of the calculation service")

    subparsers = parser.add_subparsers(dest="command", required=True)

    calc = subparsers.add_parser("calc", help="Run a single calculation")
    calc.add_argument("first", help="First operand")
    calc.add_argument("second", help="Second operand")
    calc.add_argument(
        "--operation",
        "-o",
        default=Operation.ADD.value,
        choices=[op.value for op in Operation],
        help="Operation to apply (default: add)",
    )

    subparsers.add_parser("history", help="Show past calculations")
    subparsers.add_parser("interactive", help="Start an interactive session")

    args = parser.parse_args(argv)

    try:
        return CliArgs(
            command=args.command,
            first=getattr(args, "first", ""),
            second=getattr(args, "second", ""),
            operation=getattr(args, "operation", Operation.ADD.value),
            base_url=args.base_url,
        )
    except ValidationError as exc:
        parser.error(str(exc))


def build_client(base_url: Optional[str] = None) -> CalculationClient:
    """Create the service client, preferring an explicit base URL over the configuration."""
    client = CalculationClient.from_settings()
    if base_url:
        client = client.model_copy(update={"base_url": base_url.rstrip("/")})
    return client


def parse_expression(line: str) -> Optional[Tuple[str, Operation, str]]:
    """
    Split a line such as ``3 * 5`` into operand text and operation.

    Tokens must be space-separated. Operand text is not checked here.

    :param str line: Line typed by the user

    :return: (first operand, operation, second operand), or None if the line is not of that shape
    :rtype: Optional[Tuple[str, Operation, str]]
    """
    tokens: List[str] = line.split()
    if len(tokens) != 3 or tokens[1] not in OPERATORS:
        return None
    return tokens[0], OPERATORS[tokens[1]], tokens[2]


def _print_outcome(controller: CalculationController) -> None:
    for field in InputField:
        message = controller.field_message(field)
        if message:
            print(f"{field.value}: {message}")
    if controller.message:
        print(controller.message)


async def run_calc(service: CalculationService, first: str, second: str, operation: Operation) -> int:
    """Run one calculation and print its outcome."""
    controller = CalculationController(service=service, first_operand=first, second_operand=second)
    controller.select_operation(operation)
    state = await controller.submit()
    _print_outcome(controller)
    return 0 if isinstance(state, Success) else 1


async def run_history(service: CalculationService) -> int:
    """Load the history and print every rendered line."""
    loader = HistoryLoader(service=service)
    state = await loader.load()
    for line in loader.render():
        print(line)
    return 1 if isinstance(state, HistoryFailure) else 0


async def run_interactive(service: CalculationService, read_line: Callable[[str], str] = input) -> int:
    """
    Read expressions until ``quit`` or end of input.

    One calculator is kept for the whole session, so operands and operation
    persist between lines just as they do in the calculator view.
    """
    controller = CalculationController(service=service)
    status = 0
    print(USAGE_HINT)

    while True:
        try:
            line = read_line(PROMPT).strip()
        except EOFError:
            break

        if not line:
            continue
        if line in ("quit", "exit"):
            break
        if line == "history":
            status = await run_history(service)
            continue

        parsed = parse_expression(line)
        if parsed is None:
            print(USAGE_HINT)
            continue

        first, operation, second = parsed
        controller.set_operand(InputField.FIRST, first)
        controller.set_operand(InputField.SECOND, second)
        controller.select_operation(operation)
        state = await controller.submit()
        _print_outcome(controller)
        status = 0 if isinstance(state, Success) else 1

    return status


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Entry point of the ``remote-calculator`` command.
    """
    cli_args = parse_args(argv)
    client = build_client(cli_args.base_url)
    logger.debug(f"🔧 Using calculation service at {client.base_url}")

    if cli_args.command == "calc":
        return asyncio.run(run_calc(client, cli_args.first, cli_args.second, cli_args.operation))
    if cli_args.command == "history":
        return asyncio.run(run_history(client))
    return asyncio.run(run_interactive(client))


if __name__ == "__main__":
    raise SystemExit(main())
