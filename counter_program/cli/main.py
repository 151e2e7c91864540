"""
counter-program — developer CLI for the counter program.

Implements:
  - counter-program encode OP [VALUE]     Build an instruction buffer (hex)
  - counter-program decode HEX            Decode an instruction buffer
  - counter-program record HEX            Decode a stored record
  - counter-program simulate STEP...      Run steps against an in-memory host

Global options:
  --log-level TEXT       Minimum log level (default: COUNTER_LOG_LEVEL, else INFO)
  --json-logs            Emit JSON log lines on stderr

Examples:
  counter-program encode add 5            # 0x0305000000
  counter-program decode 0x0305000000
  counter-program record 0x2a000000
  counter-program simulate init add:5 double sub:3
  counter-program simulate --unsigned init
"""

from __future__ import annotations

import json
from typing import Any, List, NoReturn, Optional

import typer

from counter_program import logging as clog
from counter_program.auth import Keypair, sign_request
from counter_program.codec.instruction import (Instruction, Op,
                                               decode_instruction,
                                               encode_instruction)
from counter_program.codec.record import decode_record
from counter_program.config import load_config
from counter_program.errors import ProgramError
from counter_program.runtime.host import InMemoryHost
from counter_program.version import __version__

app = typer.Typer(
    name="counter-program",
    help="Encode, decode and simulate counter-program instructions",
    no_args_is_help=True,
    add_completion=False,
)


def _hex_to_bytes(value: str) -> bytes:
    s = value.strip()
    if s.startswith(("0x", "0X")):
        s = s[2:]
    try:
        return bytes.fromhex(s)
    except ValueError:
        raise typer.BadParameter(f"invalid hex string: {value!r}") from None


def _echo_json(obj: Any) -> None:
    typer.echo(json.dumps(obj, sort_keys=True))


def _fail(err: ProgramError) -> NoReturn:
    typer.echo(json.dumps(err.to_dict(), sort_keys=True), err=True)
    raise typer.Exit(1)


def _build_instruction(op_name: str, value: Optional[int]) -> Instruction:
    try:
        op = Op.from_name(op_name)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None
    if op.takes_operand and value is None:
        raise typer.BadParameter(f"{op.name.lower()} requires a value")
    try:
        return Instruction(op, value)
    except (TypeError, ValueError) as e:
        raise typer.BadParameter(str(e)) from None


def parse_step(step: str) -> Instruction:
    """Parse 'init', 'double', 'add:5', 'divide:0', ... into an Instruction."""
    name, sep, raw = step.partition(":")
    value: Optional[int] = None
    if sep:
        try:
            value = int(raw, 0)
        except ValueError:
            raise typer.BadParameter(f"invalid value in step {step!r}") from None
    return _build_instruction(name, value)


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Minimum log level (DEBUG, INFO, WARNING, ERROR); default from COUNTER_LOG_LEVEL",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Emit JSON log lines on stderr",
    ),
) -> None:
    """
    counter-program — a persistent u32 counter behind a signed, tagged-union
    instruction format.
    """
    clog.configure(json=True if json_logs else None, level=log_level)


@app.command()
def version() -> None:
    """Print the package version."""
    typer.echo(__version__)


@app.command("config")
def show_config() -> None:
    """Print the effective configuration as JSON."""
    _echo_json(load_config().as_dict())


@app.command()
def encode(
    op: str = typer.Argument(..., help="init, double, half, add, subtract, multiply, divide"),
    value: Optional[int] = typer.Argument(None, help="u32 operand for add/subtract/multiply/divide"),
) -> None:
    """Encode an instruction and print it as 0x-prefixed hex."""
    ix = _build_instruction(op, value)
    typer.echo("0x" + encode_instruction(ix).hex())


@app.command()
def decode(
    data: str = typer.Argument(..., help="Instruction bytes as hex"),
    lenient: bool = typer.Option(False, "--lenient", help="Ignore trailing bytes"),
) -> None:
    """Decode an instruction buffer and print it as JSON."""
    try:
        ix = decode_instruction(_hex_to_bytes(data), strict=False if lenient else None)
    except ProgramError as e:
        _fail(e)
    _echo_json(ix.to_dict())


@app.command()
def record(data: str = typer.Argument(..., help="Account bytes as hex")) -> None:
    """Decode a stored record and print it as JSON."""
    try:
        rec = decode_record(_hex_to_bytes(data))
    except ProgramError as e:
        _fail(e)
    _echo_json({"count": rec.count})


@app.command()
def simulate(
    steps: List[str] = typer.Argument(..., help="Steps such as: init add:5 double sub:3"),
    seed: Optional[str] = typer.Option(
        None, "--seed", help="32-byte hex seed for a deterministic account keypair"
    ),
    unsigned: bool = typer.Option(False, "--unsigned", help="Submit steps without a credential"),
    create: bool = typer.Option(
        True, "--create/--no-create", help="Pre-allocate the account before the first step"
    ),
) -> None:
    """
    Run steps in order against a fresh in-memory host and print one JSON
    object per step. Failed steps are reported, not fatal.
    """
    instructions = [parse_step(s) for s in steps]
    if seed is not None:
        try:
            keypair = Keypair.from_seed(_hex_to_bytes(seed))
        except ValueError as e:
            raise typer.BadParameter(str(e)) from None
    else:
        keypair = Keypair.generate()

    host = InMemoryHost()
    if create:
        host.create_account(keypair.address)

    for step, ix in zip(steps, instructions):
        data = encode_instruction(ix)
        cred = None if unsigned else sign_request(keypair, data)
        result = host.invoke(keypair.address, data, cred)
        _echo_json({"step": step, "instruction": "0x" + data.hex(), **result.to_dict()})


def main() -> None:
    """Entry point for the counter-program CLI."""
    app()


if __name__ == "__main__":
    main()
