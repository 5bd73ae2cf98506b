"""Result candidates presented to the user.

A ``ResultCandidate`` is the projection of a ``Workspace`` or a
``RemoteMachine`` that the query layer scores and a front end displays:
a title to match against, a subtitle, the score, and a reference back to
the originating record for the launch and context-menu actions.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from codelaunch.discovery.models import RemoteMachine, Workspace
from codelaunch.launcher import target_arguments

SSH_SUBTITLE = "SSH remote machine"


def workspace_title(workspace: Workspace) -> str:
    """Display title of a workspace.

    Local workspaces show their folder name. Remote ones show the history
    label when present, else ``"<folder> - <machine> (<location>)"``.
    """
    title = workspace.folder_name
    if workspace.is_local:
        return title
    if workspace.label is not None:
        return workspace.label
    if workspace.extra_info:
        title = f"{title} - {workspace.extra_info}"
    return f"{title} ({workspace.location.value})"


def workspace_subtitle(workspace: Workspace) -> str:
    where = "" if workspace.is_local else f" in {workspace.location.value}"
    path = str(Path(workspace.relative_path)) if workspace.is_local else workspace.relative_path
    return f"Workspace{where}: {path}"


def machine_title(machine: RemoteMachine) -> str:
    title = f"SSH: {machine.host}"
    if machine.user and machine.host_name:
        title += f" [{machine.user}@{machine.host_name}]"
    return title


@dataclass(frozen=True)
class ResultCandidate:
    """One entry of the result list.

    Attributes:
        title: Text matched against the query and shown first.
        subtitle: Secondary line / tooltip.
        target: The originating workspace or remote machine.
        score: Match score; 0 only when returned unscored.
    """

    title: str
    subtitle: str
    target: Workspace | RemoteMachine
    score: int = 0

    @property
    def executable(self) -> Path:
        return self.target.instance.executable_path

    @property
    def arguments(self) -> str:
        """Command-line arguments that open the target."""
        return target_arguments(self.target)

    def with_score(self, score: int) -> ResultCandidate:
        return replace(self, score=score)

    def to_dict(self) -> dict:
        kind = "workspace" if isinstance(self.target, Workspace) else "remote-machine"
        return {
            "title": self.title,
            "subtitle": self.subtitle,
            "kind": kind,
            "score": self.score,
            "executable": str(self.executable),
            "arguments": self.arguments,
        }


def candidate_for_workspace(workspace: Workspace) -> ResultCandidate:
    return ResultCandidate(
        title=workspace_title(workspace),
        subtitle=workspace_subtitle(workspace),
        target=workspace,
    )


def candidate_for_machine(machine: RemoteMachine) -> ResultCandidate:
    return ResultCandidate(title=machine_title(machine), subtitle=SSH_SUBTITLE, target=machine)
