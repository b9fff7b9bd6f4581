"""
Command line entry point.

    symkernel -f <connection file>      run the kernel (what Jupyter calls)
    symkernel install [--user] [--prefix PREFIX] [--name NAME]
"""

import argparse
import json
import os
import sys
import tempfile
from typing import Sequence

from jupyter_client.kernelspec import KernelSpecManager

from .core import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

DEFAULT_KERNEL_NAME = "symkernel"


def kernel_spec() -> dict:
    """Contents of ``kernel.json``."""
    return {
        "argv": [sys.executable, "-m", "symkernel", "-f", "{connection_file}"],
        "display_name": "Symjamma (sympy)",
        "language": "symjamma",
    }


def install_kernelspec(
    user: bool = False,
    prefix: str | None = None,
    name: str = DEFAULT_KERNEL_NAME,
) -> str:
    """
    Install the kernelspec.

    Returns:
        Directory the kernelspec was installed into
    """
    with tempfile.TemporaryDirectory() as tmp:
        os.chmod(tmp, 0o755)
        with open(os.path.join(tmp, "kernel.json"), "w") as f:
            json.dump(kernel_spec(), f, indent=2)
        destination = KernelSpecManager().install_kernel_spec(tmp, name, user=user, prefix=prefix)

    logger.info("kernelspec_installed", name=name, destination=destination)
    return destination


def _install(argv: Sequence[str]) -> int:
    parser = argparse.ArgumentParser(prog="symkernel install", description="Install the symkernel kernelspec")
    parser.add_argument("--user", action="store_true", help="Install for the current user only")
    parser.add_argument("--prefix", type=str, default=None, help="Install under this prefix (e.g. sys.prefix)")
    parser.add_argument("--name", type=str, default=DEFAULT_KERNEL_NAME, help="Kernelspec name")
    args = parser.parse_args(argv)

    destination = install_kernelspec(user=args.user, prefix=args.prefix, name=args.name)
    print(f"Installed kernelspec {args.name} in {destination}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    if argv and argv[0] == "install":
        return _install(argv[1:])

    if argv and argv[0] == "run":
        argv = argv[1:]

    from ipykernel.kernelapp import IPKernelApp

    from .kernel import SymKernel

    IPKernelApp.launch_instance(argv=argv, kernel_class=SymKernel)
    return 0


if __name__ == "__main__":
    sys.exit(main())
