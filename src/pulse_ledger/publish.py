"""Commit-and-push runner for a data repository.

Pulls before generating so the push never needs a merge, then commits only
the pipeline's own output files.
"""

from __future__ import annotations
import subprocess
from pathlib import Path
from typing import Callable, Sequence

from .errors import PublishFailed
from .utils import eprint, progress_print

BOT_NAME       = "Kochu Pulse Bot"
BOT_EMAIL      = "local-pulse-bot@users.noreply.github.com"
COMMIT_MESSAGE = "📈 WhatPulse stats updated via Kochu Pulse Bot"
STASH_MESSAGE  = "autostash: whatpulse runner"


class GitRunner:
    def __init__(self, root: Path, verbose: bool=False):
        self.root = root
        self.verbose = verbose

    def run(self, *args: str):
        eprint(f"[Git] git {' '.join(args)}", self.verbose)
        result = subprocess.run(["git", *args], cwd=self.root)
        if result.returncode != 0:
            raise PublishFailed(f"git {' '.join(args)} failed with exit code {result.returncode}",
                                returncode=result.returncode)

    def succeeds(self, *args: str) -> bool:
        eprint(f"[Git] git {' '.join(args)}", self.verbose)
        return subprocess.run(["git", *args], cwd=self.root).returncode == 0

    def is_clean(self) -> bool:
        return self.succeeds("diff", "--quiet") and self.succeeds("diff", "--cached", "--quiet")


def publish(git: GitRunner, generate: Callable[[], None], outputs: Sequence[str], quiet: bool=False) -> bool:
    """Pull, regenerate, commit and push. Returns False when nothing changed."""
    had_local_changes = not git.is_clean()
    if had_local_changes:
        progress_print("Working tree not clean, stashing changes before pull...", quiet)
        git.run("stash", "push", "-u", "-m", STASH_MESSAGE)

    git.run("pull", "--rebase")

    if had_local_changes:
        progress_print("Re-applying stashed changes...", quiet)
        # a conflicting pop stops the run here rather than pushing a mess
        git.run("stash", "pop")

    generate()

    git.run("add", *outputs)
    if git.succeeds("diff", "--staged", "--quiet"):
        print("No changes to commit")
        return False

    git.run("config", "user.name", BOT_NAME)
    git.run("config", "user.email", BOT_EMAIL)
    git.run("commit", "-m", COMMIT_MESSAGE)
    git.run("push")
    print("Committed and pushed.")
    return True
