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

"""Interactive prompts, behind an interface so commands can run without a terminal."""


class Prompter:
    def ask(self, message, default=None):
        raise NotImplementedError

    def confirm(self, message, default=True):
        raise NotImplementedError

    def choose(self, message, choices):
        """Return the index of the selected entry in choices."""
        raise NotImplementedError


class ConsolePrompter(Prompter):
    def __init__(self, input_func=input, output_func=print):
        self._input = input_func
        self._print = output_func

    def ask(self, message, default=None):
        suffix = f" ({default})" if default is not None else ""
        answer = self._input(f"{message}{suffix}: ").strip()
        if not answer and default is not None:
            return default
        return answer

    def confirm(self, message, default=True):
        hint = "Y/n" if default else "y/N"
        while True:
            answer = self._input(f"{message} ({hint}): ").strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self._print("Please answer 'y' or 'n'.")

    def choose(self, message, choices):
        self._print(message)
        for i, choice in enumerate(choices, start=1):
            self._print(f"  {i}) {choice}")
        while True:
            answer = self._input(f"Select 1-{len(choices)}: ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return int(answer) - 1
            self._print("Invalid selection.")


class AutoConfirmPrompter(Prompter):
    """Answers yes to every confirmation; everything else goes to the wrapped prompter."""

    def __init__(self, inner):
        self.inner = inner

    def ask(self, message, default=None):
        return self.inner.ask(message, default)

    def confirm(self, message, default=True):
        return True

    def choose(self, message, choices):
        return self.inner.choose(message, choices)
