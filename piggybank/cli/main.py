"""
piggybank: command line for the piggy bank contracts.

Commands:
  - piggybank contracts          List registered contracts and entrypoints
  - piggybank schema NAME        Print a contract's parameter schema as JSON
  - piggybank encode VALUE       Encode a JSON value to parameter hex
  - piggybank simulate SCRIPT    Run a JSON scenario against a fresh host

Scenario script (JSON):
  {
    "contract": "DCBBank",
    "owner": "0x<64 hex>",
    "parameter": "0x...",                       # optional init parameter
    "balances": {"0x<64 hex>": 1000},           # optional funded accounts
    "calls": [
      {"entrypoint": "insertAmount", "sender": "0x...", "amount": 100},
      {"entrypoint": "smashAmount", "sender": "0x..."}
    ]
  }

Each step prints one JSON object. A failing call is reported with its error and
the script carries on with the next call.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .. import contracts as _contracts  # noqa: F401  (registers shipped contracts)
from ..abi import ABITypeError, ValidationError, encode, parse_type
from ..config import load_config
from ..errors import BankError
from ..runtime.context import ContextError, to_bytes, to_hex
from ..runtime.host import Host
from ..runtime.registry import get_contract, list_contracts
from ..version import __version__

app = typer.Typer(
    name="piggybank",
    help="Piggy bank contracts: inspect schemas, encode parameters, simulate calls",
    no_args_is_help=True,
    add_completion=False,
)


def _pretty(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False)


def _line(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, sort_keys=True)


def _fail(msg: str) -> None:
    typer.echo(f"Error: {msg}", err=True)
    raise typer.Exit(1)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
        envvar="PIGGYBANK_LOG_LEVEL",
    ),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    if log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    else:
        level = load_config().log_level_value
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("contracts")
def list_cmd() -> None:
    """List registered contracts with their entrypoints."""
    for name in list_contracts():
        module = get_contract(name)
        eps = ", ".join(
            f"{e.name}{' (payable)' if e.payable else ''}" for e in module
        )
        typer.echo(f"{name}: {eps}")
        if module.description:
            typer.echo(f"    {module.description}")


@app.command()
def schema(name: str = typer.Argument(..., help="Contract name")) -> None:
    """Print a contract's init and entrypoint parameter schema as JSON."""
    try:
        module = get_contract(name)
    except BankError as e:
        _fail(e.message)
    typer.echo(_pretty(module.schema()))


@app.command("encode")
def encode_cmd(
    value: str = typer.Argument(..., help="JSON value to encode"),
    type_spec: Optional[str] = typer.Option(None, "--type", "-t", help="Type spec, e.g. u8, bool, [string;3]"),
    contract: Optional[str] = typer.Option(None, "--contract", "-c", help="Use a contract's declared schema"),
    entrypoint: Optional[str] = typer.Option(
        None, "--entrypoint", "-e", help="Entrypoint of --contract (init parameter if omitted)"
    ),
) -> None:
    """
    Encode a JSON value to 0x-hex parameter bytes.

    Examples:
      piggybank encode true --type bool
      piggybank encode '{"age1": 1, "age": 30}' --contract INDBankStruct
      piggybank encode 7 --contract INDBankStruct --entrypoint insertAmount3
    """
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        _fail(f"VALUE is not valid JSON: {e}")

    try:
        if type_spec:
            typ = parse_type(type_spec)
        elif contract:
            module = get_contract(contract)
            typ = module.entrypoint(entrypoint).parameter if entrypoint else module.init_entry.parameter
            if typ is None:
                _fail("selected schema takes no parameter")
        else:
            _fail("one of --type or --contract is required")
        typer.echo(to_hex(encode(parsed, typ)))
    except (ABITypeError, ValidationError) as e:
        _fail(str(e))
    except BankError as e:
        _fail(e.message)


def _run_script(script: Dict[str, Any]) -> int:
    host = Host()
    for account, amount in (script.get("balances") or {}).items():
        host.fund(account, int(amount))

    try:
        address = host.deploy(
            script["contract"],
            script["owner"],
            to_bytes(script.get("parameter") or b""),
        )
    except BankError as e:
        typer.echo(_line({"step": "deploy", "ok": False, "error": e.to_dict()}))
        return 1
    typer.echo(_line({
        "step": "deploy",
        "ok": True,
        "address": str(address),
        "state": host.state_of(address).label,
    }))

    for i, call in enumerate(script.get("calls") or []):
        name = call.get("entrypoint") if isinstance(call, dict) else None
        try:
            if not isinstance(call, dict):
                raise TypeError(f"call must be an object, got {type(call).__name__}")
            outcome = host.invoke(
                address,
                call["entrypoint"],
                sender=call["sender"],
                amount=int(call.get("amount", 0)),
                parameter=to_bytes(call.get("parameter") or b""),
            )
        except BankError as e:
            typer.echo(_line({"step": i, "entrypoint": name, "ok": False, "error": e.to_dict()}))
            continue
        except (KeyError, TypeError, ValueError) as e:
            # ContextError (bad hex) is a ValueError
            error = {"code": "malformed_call", "message": str(e), "context": {}}
            typer.echo(_line({"step": i, "entrypoint": name, "ok": False, "error": error}))
            continue
        typer.echo(_line({"step": i, **outcome.to_dict()}))

    typer.echo(_line({
        "step": "final",
        "state": host.state_of(address).label,
        "balance": host.balance_of(address),
    }))
    return 0


@app.command()
def simulate(
    script_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Scenario JSON file"),
) -> None:
    """Deploy a contract and run a scripted sequence of calls against it."""
    try:
        script = json.loads(script_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        _fail(f"invalid JSON in {script_path}: {e}")
    if not isinstance(script, dict) or "contract" not in script or "owner" not in script:
        _fail("script must be an object with 'contract' and 'owner'")

    try:
        code = _run_script(script)
    except BankError as e:
        _fail(f"script setup failed: {e.message}")
    except (ContextError, KeyError, TypeError, ValueError) as e:
        _fail(f"malformed script: {e}")
    raise typer.Exit(code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
