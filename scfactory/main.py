#!/usr/bin/env python3
# Copyright 2025 R5
# This file is part of the R5 Core library.
#
# This software is provided "as is", without warranty of any kind,
# express or implied, including but not limited to the warranties
# of merchantability, fitness for a particular purpose and
# noninfringement. In no event shall the authors or copyright
# holders be liable for any claim, damages, or other liability,
# whether in an action of contract, tort or otherwise, arising
# from, out of or in connection with the software or the use or
# other dealings in the software.
"""
SCFactory – Contract Factory helper CLI

Commands:
  create                       Generate a Hardhat + TypeScript project scaffold
  deploy                       Deploy a compiled contract directly
  set                          Register an implementation in the factory
  deployViaFactory             Clone & initialize a proxy through the factory
  deployViaFactoryByVersion    Same, pinned to a 1-based implementation version

Environment (or .env): PRIVATE_KEY, RPC_URL, RPC_URL_<chainId>, FACTORY_ADDRESS_<chainId>.
Optional local overrides are read from "scfactory.ini" ([SCFactory] section).
"""

import argparse
import logging
import sys

from scfactory import constants, deploy, factory, scaffold
from scfactory.config import DeploymentOptions, load_settings
from scfactory.errors import FactoryCLIError, GaslessNotSupported, UserAbort
from scfactory.prompter import AutoConfirmPrompter, ConsolePrompter

logger = logging.getLogger("scfactory")


def print_banner():
    print("SCFactory – Contract Factory CLI")
    print(f"Version: {constants.VERSION}")
    print("")


def setup_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%d-%m|%H:%M:%S"
    )


def positive_int(value):
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def build_parser():
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true",
                        help="Print debug logging.")
    common.add_argument("-y", "--yes", action="store_true",
                        help="Do not ask for confirmation before sending transactions.")

    chain = argparse.ArgumentParser(add_help=False)
    chain.add_argument("--chainId", dest="chain_id", type=int, required=True,
                       help="Target chainId.")
    chain.add_argument("--gasless", action="store_true",
                       help="Use the relayer (requires --accessToken & --clientKey). Not yet supported.")
    chain.add_argument("--accessToken", dest="access_token",
                       help="JWT for gas-less submission.")
    chain.add_argument("--clientKey", dest="client_key",
                       help="Client key for gas-less submission.")

    parser = argparse.ArgumentParser(
        prog="scfactory",
        description="SCFactory - contract factory helper CLI"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {constants.VERSION}")
    sub = parser.add_subparsers(dest="command", metavar="command")
    sub.required = True

    p = sub.add_parser("create", parents=[common],
                       help="Generate a Hardhat + TS project scaffold.")
    p.add_argument("--skip-install", action="store_true",
                   help="Do not run npm init / npm install.")

    p = sub.add_parser("deploy", parents=[common, chain],
                       help="Deploy a compiled contract directly.")
    p.add_argument("--args", default="[]",
                   help="Constructor args as JSON array.")
    p.add_argument("--initializer",
                   help="Initializer function name, called after deployment.")
    p.add_argument("--initArgs", dest="init_args", default="[]",
                   help="Initializer args as JSON array.")
    p.add_argument("--contract",
                   help="Artifact to deploy (contract name or path substring).")
    p.add_argument("--no-compile", dest="compile", action="store_false",
                   help="Skip 'npx hardhat compile' before deploying.")

    p = sub.add_parser("set", parents=[common, chain],
                       help="Register an implementation address in the factory.")
    p.add_argument("impl_address", metavar="implAddress")
    p.add_argument("--contractType", dest="contract_type", required=True,
                   help='contractType identifier (e.g. "MyToken").')

    p = sub.add_parser("deployViaFactory", parents=[common, chain],
                       help="Use the factory to clone & initialize a proxy.")
    p.add_argument("owner", metavar="implementationOwner")
    p.add_argument("contract_type", metavar="contractType")
    p.add_argument("fn_signature", metavar="fnSignature",
                   help='e.g. "function initialize(string,string,uint256)"')
    p.add_argument("fn_args", metavar="fnArgs",
                   help='JSON array, e.g. \'["MyToken","TTK",1000]\'')

    p = sub.add_parser("deployViaFactoryByVersion", parents=[common, chain],
                       help="Clone a specific implementation version & initialize a proxy.")
    p.add_argument("owner", metavar="implementationOwner")
    p.add_argument("contract_type", metavar="contractType")
    p.add_argument("version", type=positive_int, help="1-based version index.")
    p.add_argument("fn_signature", metavar="fnSignature")
    p.add_argument("fn_args", metavar="fnArgs")

    return parser


def options_from_args(args):
    return DeploymentOptions(
        chain_id=args.chain_id,
        args=getattr(args, "args", "[]"),
        initializer=getattr(args, "initializer", None),
        init_args=getattr(args, "init_args", "[]"),
        contract=getattr(args, "contract", None),
        compile=getattr(args, "compile", True),
        gasless=args.gasless,
        access_token=args.access_token,
        client_key=args.client_key,
    )


def dispatch(args, settings, prompter, deployer_factory=None):
    extra = {} if deployer_factory is None else {"deployer_factory": deployer_factory}

    if args.command == "create":
        return scaffold.create_project(prompter, install=not args.skip_install)

    options = options_from_args(args)
    if args.command == "deploy":
        return deploy.deploy_contract(options, settings, prompter, **extra)
    if args.command == "set":
        return factory.set_implementation(
            args.impl_address, args.contract_type, options, settings, prompter, **extra
        )
    if args.command == "deployViaFactory":
        return factory.deploy_via_factory(
            args.owner, args.contract_type, args.fn_signature, args.fn_args,
            options, settings, prompter, **extra
        )
    if args.command == "deployViaFactoryByVersion":
        return factory.deploy_via_factory_by_version(
            args.owner, args.contract_type, args.version, args.fn_signature, args.fn_args,
            options, settings, prompter, **extra
        )
    raise FactoryCLIError(f"Unknown command {args.command}")


def run(argv=None, environ=None, prompter=None, deployer_factory=None, workdir="."):
    """Parse argv, run one command and return the process exit status."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    print_banner()

    if prompter is None:
        prompter = ConsolePrompter()
    if args.yes:
        prompter = AutoConfirmPrompter(prompter)

    try:
        settings = load_settings(environ, workdir)
        dispatch(args, settings, prompter, deployer_factory)
    except UserAbort as e:
        print(e)
        return 0
    except GaslessNotSupported as e:
        logger.debug("%s", e)
        return 1
    except FactoryCLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nInterrupted.", file=sys.stderr)
        return 1
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
