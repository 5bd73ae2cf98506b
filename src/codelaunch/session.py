"""Query session: aggregation, de-duplication and scoring of results.

A ``DiscoverySession`` is created once by whatever front end drives the
launcher (the CLI, or a launcher host). ``initialize()`` locates the editor
instances and fixes the default instance; every query then reuses the
session instead of consulting module-level state.

Query Algorithm:
    1. Resolve the user's custom workspace URIs against the default
       instance.
    2. Append the workspaces discovered from editor history.
    3. Drop duplicates, keeping the first occurrence.
    4. Append SSH remote machines (never de-duplicated against workspaces).
    5. With an action keyword and no search text, return everything.
    6. Otherwise score every title; a zero score is raised to 1 when the
       title contains the search text; zero scores are dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from codelaunch.config import LauncherSettings
from codelaunch.discovery.editions import EditorVersion
from codelaunch.discovery.instances import InstanceLocator
from codelaunch.discovery.models import EditorInstance, RemoteMachine, Workspace
from codelaunch.discovery.remote_machines import RemoteMachineDiscovery
from codelaunch.discovery.uri import decode_workspace_uri
from codelaunch.discovery.workspaces import WorkspaceDiscovery
from codelaunch.matching import Matcher, subsequence_score
from codelaunch.results import (
    ResultCandidate,
    candidate_for_machine,
    candidate_for_workspace,
)

logger = logging.getLogger(__name__)


def choose_default_instance(instances: Sequence[EditorInstance]) -> EditorInstance | None:
    """Prefer the first Stable instance, else the first one found."""
    for instance in instances:
        if instance.version is EditorVersion.STABLE:
            return instance
    return instances[0] if instances else None


def unique_workspaces(workspaces: Iterable[Workspace]) -> list[Workspace]:
    """Remove structurally equal workspaces, keeping first occurrences."""
    return list(dict.fromkeys(workspaces))


def score_candidates(
    candidates: Iterable[ResultCandidate],
    search_text: str,
    matcher: Matcher,
) -> list[ResultCandidate]:
    """Score candidates against ``search_text`` and drop non-matches.

    A candidate the matcher scores 0 still scores 1 when its title contains
    the search text case-insensitively, so plain substring hits such as
    ``kr1`` in ``43.128.131.41-proxy-kr1`` are never suppressed.
    """
    needle = search_text.lower()
    scored: list[ResultCandidate] = []
    for candidate in candidates:
        score = matcher(search_text, candidate.title)
        if score == 0 and search_text.strip() and needle in candidate.title.lower():
            score = 1
        if score > 0:
            scored.append(candidate.with_score(score))
    return scored


class DiscoverySession:
    """Owns discovery collaborators and answers queries.

    Usage::

        session = DiscoverySession(settings=load_settings())
        session.initialize()
        for result in session.build_results("proj"):
            print(result.title, result.score)

    Attributes:
        settings: Current launcher settings; may be replaced between queries.
        instances: Instances found by ``initialize()``.
        default_instance: Instance custom workspaces are opened with.
    """

    def __init__(
        self,
        settings: LauncherSettings | None = None,
        locator: InstanceLocator | None = None,
        workspace_discovery: WorkspaceDiscovery | None = None,
        machine_discovery: RemoteMachineDiscovery | None = None,
        matcher: Matcher = subsequence_score,
    ) -> None:
        self.settings = settings if settings is not None else LauncherSettings()
        self.locator = locator if locator is not None else InstanceLocator()
        self.workspace_discovery = workspace_discovery or WorkspaceDiscovery()
        self.machine_discovery = machine_discovery or RemoteMachineDiscovery()
        self.matcher = matcher
        self.instances: list[EditorInstance] = []
        self.default_instance: EditorInstance | None = None
        self._initialized = False
        self._search_path: str | None = None

    def initialize(self, search_path: str | None = None) -> None:
        """Locate instances and choose the default instance once."""
        self._search_path = search_path
        self.instances = self.locator.locate_instances(search_path)
        self.default_instance = choose_default_instance(self.instances)
        self._initialized = True
        logger.info(
            "Session initialized: %d instance(s), default %s",
            len(self.instances),
            self.default_instance.executable_path if self.default_instance else None,
        )

    def refresh_instances(self) -> list[EditorInstance]:
        """Return current instances; the locator rescans only if the path changed.

        Uses the search path given to ``initialize()`` (``PATH`` when none was
        given). The default instance chosen by ``initialize()`` is kept.
        """
        if not self._initialized:
            self.initialize()
        else:
            self.instances = self.locator.locate_instances(self._search_path)
        return self.instances

    def custom_workspaces(self) -> list[Workspace]:
        """Resolve the user's custom URIs against the default instance."""
        if self.default_instance is None:
            return []
        resolved = (decode_workspace_uri(uri, self.default_instance) for uri in self.settings.custom_workspaces)
        return [ws for ws in resolved if ws is not None]

    def workspaces(self) -> list[Workspace]:
        """Custom plus discovered workspaces, de-duplicated."""
        instances = self.refresh_instances()
        custom = self.custom_workspaces()
        discovered = self.workspace_discovery.discover(instances) if self.settings.discover_workspaces else []
        unique = unique_workspaces([*custom, *discovered])
        logger.info(
            "Workspaces: custom=%d discovered=%d unique=%d",
            len(custom), len(discovered), len(unique),
        )
        return unique

    def remote_machines(self) -> list[RemoteMachine]:
        if not self.settings.discover_machines:
            return []
        return self.machine_discovery.discover(self.refresh_instances())

    def candidates(self) -> list[ResultCandidate]:
        """All unscored candidates: workspaces first, then remote machines."""
        results = [candidate_for_workspace(ws) for ws in self.workspaces()]
        results.extend(candidate_for_machine(m) for m in self.remote_machines())
        return results

    def build_results(self, search_text: str = "", action_keyword: str = "") -> list[ResultCandidate]:
        """Answer a query.

        Args:
            search_text: Text typed by the user.
            action_keyword: Keyword that selected this launcher, if any.

        Returns:
            Candidates with a positive score, or every candidate unscored
            when an action keyword is given without search text. Order is
            discovery order; sorting by score is left to the caller.
        """
        candidates = self.candidates()
        if action_keyword and not search_text:
            return candidates
        return score_candidates(candidates, search_text, self.matcher)


def sort_by_score(results: Iterable[ResultCandidate]) -> list[ResultCandidate]:
    """Highest score first; ties keep discovery order."""
    return sorted(results, key=lambda r: r.score, reverse=True)

