"""
Command-line interface for issuing and inspecting payware tokens.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import warnings
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence, Tuple

from .api import create_client
from .core.canonical import canonicalize
from .core.config import ConfigError, load_config
from .core.digest import DigestAlgorithm, content_digest
from .core.errors import PaywareAuthError
from .core.keys import generate_rsa_key_pair, key_info
from .core.validation import validate_token


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    logging.captureWarnings(True)


def _env_override(value: str) -> Tuple[str, str]:
    if "=" not in value:
        raise argparse.ArgumentTypeError("Overrides must look like KEY=VALUE")
    key, val = value.split("=", 1)
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError("Override key must not be empty")
    return key, val


def _collect_overrides(pairs: Iterable[Tuple[str, str]]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for key, value in pairs:
        overrides[key] = value
    return overrides


def _read_argument(value: str) -> str:
    """``@path`` reads the file at ``path``; anything else is used literally."""
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


def _load_json(value: Optional[str]) -> Any:
    if value is None:
        return None
    return json.loads(_read_argument(value))


def _emit(data: Any) -> None:
    if isinstance(data, str):
        sys.stdout.write(data + "\n")
    else:
        sys.stdout.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="payware-auth",
        description="Issue and inspect signed payware API tokens",
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to the .env file containing PAYWARE_* settings (default: .env)",
    )
    parser.add_argument(
        "--set",
        action="append",
        type=_env_override,
        metavar="KEY=VALUE",
        default=None,
        help="Override an environment variable without editing the .env file",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level (default: WARNING)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    token = commands.add_parser("token", help="Issue a token for the configured partner")
    token.add_argument("--body", help="Request body as JSON, or @file")
    token.add_argument("--merchant-id", help="Target partner for delegated (ISV) tokens")
    token.add_argument("--delegation-token", help="OAuth2 token granted by the target partner")
    token.add_argument(
        "--digest",
        choices=[a.value for a in DigestAlgorithm],
        help="Content digest algorithm (default: PAYWARE_CONTENT_DIGEST or sha256)",
    )
    token.add_argument(
        "--oauth2",
        action="store_true",
        help="Issue a direct token for the OAuth2 endpoints",
    )
    token.add_argument("--key-file", help="Private key file; overrides the configured path")

    validate = commands.add_parser("validate", help="Decode and check a token")
    validate.add_argument("token", help="JWT to inspect, or @file")
    validate.add_argument("--body", help="Expected request body as JSON, or @file")

    info = commands.add_parser("key-info", help="Describe the format of a key file")
    info.add_argument("key_file")

    canonical = commands.add_parser("canonicalize", help="Print the canonical form of JSON")
    canonical.add_argument("json", help="JSON value, or @file")

    digest = commands.add_parser("digest", help="Print the content digest of a JSON body")
    digest.add_argument("json", help="JSON value, or @file")
    digest.add_argument(
        "--algorithm",
        choices=[a.value for a in DigestAlgorithm],
        default=DigestAlgorithm.SHA256.value,
    )

    keys = commands.add_parser("generate-keys", help="Generate an RSA key pair")
    keys.add_argument("--key-size", type=int, default=2048)
    keys.add_argument("--out-dir", help="Write private.pem and public.pem into this directory")

    return parser


def _run_token(args: argparse.Namespace) -> int:
    overrides = _collect_overrides(args.set or ())
    if args.digest:
        overrides["PAYWARE_CONTENT_DIGEST"] = args.digest
    try:
        config = load_config(env_file=args.env_file, overrides=overrides)
    except ConfigError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 1

    private_key = None
    if args.key_file:
        private_key = Path(args.key_file).read_text(encoding="utf-8")

    client = create_client(config=config, private_key=private_key)
    issued = client.issue(
        _load_json(args.body),
        target_identity=args.merchant_id,
        delegation_token=args.delegation_token,
        oauth2=args.oauth2,
    )
    _emit(
        {
            "token": issued.token,
            "header": issued.header,
            "payload": issued.payload,
            "body": issued.body,
            "issuedAt": issued.issued_at.isoformat(),
        }
    )
    return 0


def _run_validate(args: argparse.Namespace) -> int:
    report = validate_token(_read_argument(args.token).strip(), _load_json(args.body))
    _emit(report.as_dict())
    for issue in report.issues:
        logging.warning("%s", issue)
    return 0 if report.valid else 1


def _run_key_info(args: argparse.Namespace) -> int:
    _emit(key_info(Path(args.key_file).read_text(encoding="utf-8")).as_dict())
    return 0


def _run_canonicalize(args: argparse.Namespace) -> int:
    _emit(canonicalize(_load_json(args.json)))
    return 0


def _run_digest(args: argparse.Namespace) -> int:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DeprecationWarning)
        value = content_digest(_load_json(args.json), args.algorithm)
    if args.algorithm == DigestAlgorithm.MD5.value:
        logging.warning("contentMd5 is deprecated, prefer sha256")
    _emit({"algorithm": args.algorithm, "digest": value})
    return 0


def _run_generate_keys(args: argparse.Namespace) -> int:
    pair = generate_rsa_key_pair(args.key_size)
    if args.out_dir:
        out_dir = Path(args.out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        private_path = out_dir / "private.pem"
        private_path.write_text(pair.private_key + "\n", encoding="utf-8")
        private_path.chmod(0o600)
        (out_dir / "public.pem").write_text(pair.public_key + "\n", encoding="utf-8")
        logging.info("Wrote %d-bit key pair to %s", pair.key_size, out_dir)
        _emit({"privateKey": str(private_path), "publicKey": str(out_dir / "public.pem")})
        return 0

    _emit(
        {
            "privateKey": pair.private_key,
            "publicKey": pair.public_key,
            "keySize": pair.key_size,
            "generated": pair.generated_at.isoformat(),
        }
    )
    return 0


_COMMANDS = {
    "token": _run_token,
    "validate": _run_validate,
    "key-info": _run_key_info,
    "canonicalize": _run_canonicalize,
    "digest": _run_digest,
    "generate-keys": _run_generate_keys,
}


def run_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        return _COMMANDS[args.command](args)
    except json.JSONDecodeError as exc:
        logging.error("Invalid JSON input: %s", exc)
    except OSError as exc:
        logging.error("Cannot read input: %s", exc)
    except (PaywareAuthError, ValueError) as exc:
        logging.error("%s failed: %s", args.command, exc)
    return 1


def main() -> None:
    sys.exit(run_cli())
