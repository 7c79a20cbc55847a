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
Project scaffolding (the 'create' command).

Writes a Hardhat + TypeScript project:
  hardhat.config.ts, .env, tsconfig.json, contracts/<Name>.sol, scripts/deploy.ts
and installs the npm dev dependencies unless told not to.
"""

import json
import logging
import os
import re
import subprocess

from scfactory import constants
from scfactory.errors import ConfigurationError

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")
PASCAL_CASE = re.compile(r"^[A-Z][A-Za-z0-9_]*$")
NAME_PLACEHOLDER = "__CONTRACT_NAME__"

DOTENV_TEMPLATE = """RPC_URL=
PRIVATE_KEY=
"""

TSCONFIG = {
    "compilerOptions": {
        "target": "ES2020",
        "module": "commonjs",
        "moduleResolution": "node",
        "strict": True,
        "esModuleInterop": True,
        "resolveJsonModule": True,
        "skipLibCheck": True,
        "forceConsistentCasingInFileNames": True,
    },
    "include": ["hardhat.config.ts", "contracts", "scripts", "test"],
}


def read_template(relpath):
    with open(os.path.join(TEMPLATE_DIR, relpath), "r") as f:
        return f.read()


def is_pascal_case(name):
    return bool(PASCAL_CASE.match(name))


def ask_contract_name(prompter):
    while True:
        name = prompter.ask("Contract name", default="Example")
        if is_pascal_case(name):
            return name
        print("PascalCase only")


def _run(cmd, cwd):
    logger.debug("Running %s in %s", cmd, cwd)
    try:
        subprocess.run(cmd, cwd=cwd, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ConfigurationError(f"'{' '.join(cmd)}' failed: {e}") from e


def install_dependencies(root):
    if not os.path.exists(os.path.join(root, "package.json")):
        _run(["npm", "init", "-y"], root)
    _run(["npm", "install", "--save-dev"] + constants.NPM_DEV_DEPENDENCIES, root)


def _write(root, relpath, content):
    path = os.path.join(root, relpath)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)
    print(f"Created {relpath}")


def write_project_files(root, contract_name):
    _write(root, "hardhat.config.ts",
           read_template("hardhat.config.ts").replace(NAME_PLACEHOLDER, contract_name))
    _write(root, ".env", DOTENV_TEMPLATE)
    _write(root, "tsconfig.json", json.dumps(TSCONFIG, indent=2) + "\n")
    contract = read_template(os.path.join("contracts", "Example.sol"))
    contract = re.sub(r"\bcontract Example\b", f"contract {contract_name}", contract)
    _write(root, os.path.join("contracts", f"{contract_name}.sol"), contract)
    _write(root, os.path.join("scripts", "deploy.ts"),
           read_template(os.path.join("scripts", "deploy.ts")).replace(NAME_PLACEHOLDER, contract_name))


def create_project(prompter, base_dir=".", install=True):
    """Ask for a directory and contract name, then scaffold the project. Returns its path."""
    project_dir = prompter.ask("Project directory name", default="my-contract")
    contract_name = ask_contract_name(prompter)

    root = os.path.abspath(os.path.join(base_dir, project_dir))
    if os.path.exists(root):
        logger.warning('Directory "%s" already exists; files may be overwritten.', project_dir)
    os.makedirs(root, exist_ok=True)

    if install:
        install_dependencies(root)

    write_project_files(root, contract_name)
    print(f"Project scaffolded in ./{project_dir}")
    return root
