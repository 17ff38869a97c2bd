"""Nix expression language evaluation."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Optional, Sequence

from .errors import (
    EvaluationFailedError,
    EvaluatorCommandError,
    EvaluatorNotFoundError,
    JSONParseError,
)

logger = logging.getLogger(__name__)

NIX_INSTANTIATE = "nix-instantiate"
EVAL_ARGS = ("--strict", "--json", "--eval")


def eval_file(
    path: Path,
    command: Sequence[str] = (NIX_INSTANTIATE,),
    timeout: Optional[float] = None,
) -> Any:
    """Evaluate a Nix file strictly and decode its JSON output.

    Runs ``nix-instantiate --strict --json --eval <path>`` and waits for it to
    finish. The exit status is not consulted: any output on standard error
    counts as a failed evaluation.

    Args:
        path: The ``.nix`` file to evaluate.
        command: The evaluator command, without the evaluation arguments.
        timeout: Seconds to wait for the evaluator; ``None`` waits forever.

    Returns:
        The decoded JSON value printed by the evaluator.

    Raises:
        EvaluatorNotFoundError: If the evaluator binary does not exist.
        EvaluatorCommandError: If the evaluator could not be run.
        EvaluationFailedError: If the evaluator wrote to standard error or
            timed out.
        JSONParseError: If standard output is not valid JSON.
    """
    args = [*command, *EVAL_ARGS, str(path)]
    logger.debug("Running %s", " ".join(args))
    try:
        result = subprocess.run(args, capture_output=True, timeout=timeout)
    except FileNotFoundError as e:
        raise EvaluatorNotFoundError(command[0]) from e
    except subprocess.TimeoutExpired as e:
        raise EvaluationFailedError(f"{command[0]} timed out after {timeout} seconds") from e
    except OSError as e:
        raise EvaluatorCommandError(f"executing {command[0]} failed: {e}") from e

    if result.stderr:
        raise EvaluationFailedError(result.stderr.decode("utf-8", errors="replace"))

    try:
        return json.loads(result.stdout)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise JSONParseError(f"failed to parse {command[0]} output as JSON: {e}") from e
