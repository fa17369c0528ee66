"""Grade history rules — which entries a step has and which one is elected.

Pure functions over immutable Steps. Every mutation helper returns a new Step
whose history carries exactly one elected entry and whose mirrored fields
(``score``, ``content`` / ``human_note``, ``is_human_graded``) match it.
"""

from datetime import datetime
from typing import TypeAlias

from cert_desk.grading.domain.errors import EntryIndexError
from cert_desk.run.domain.grade_entry import GradeEntry
from cert_desk.run.domain.step import Step

IndexedEntry: TypeAlias = tuple[int, GradeEntry]


def synthesize_legacy_entry(step: Step) -> GradeEntry:
    """Build the implicit single entry of a step recorded without history.

    The step must carry a score.
    """
    if step.score is None:
        raise ValueError(f"step '{step.id}' has no score to synthesize from")
    if step.is_human_graded:
        return GradeEntry(
            source="human",
            score=step.score,
            reasoning=step.human_note or "",
            created_at=step.timestamp,
            is_elected=True,
        )
    return GradeEntry(
        source="automated",
        score=step.score,
        reasoning=step.content,
        created_at=step.timestamp,
        is_elected=True,
    )


def current_entries(step: Step) -> tuple[GradeEntry, ...]:
    """Return the step's entries, synthesizing the legacy entry when needed."""
    if step.grading_history:
        return step.grading_history
    if step.score is None:
        return ()
    return (synthesize_legacy_entry(step),)


def _mirrored_triple(step: Step) -> tuple[int | None, str, str]:
    if step.is_human_graded:
        return step.score, "human", step.human_note or ""
    return step.score, "automated", step.content


def elected_index(step: Step, entries: tuple[GradeEntry, ...] | None = None) -> int | None:
    """Return the index of the elected entry, or None when there are no entries.

    Without an explicit flag, the most recent entry matching the step's
    mirrored (score, source, reasoning) wins; failing that, the most recent
    entry.
    """
    if entries is None:
        entries = current_entries(step)
    if not entries:
        return None

    for index, entry in enumerate(entries):
        if entry.is_elected:
            return index

    target = _mirrored_triple(step)
    for index in range(len(entries) - 1, -1, -1):
        entry = entries[index]
        if (entry.score, entry.source, entry.reasoning) == target:
            return index

    return len(entries) - 1


def elected_entry(step: Step) -> GradeEntry | None:
    entries = current_entries(step)
    index = elected_index(step, entries)
    if index is None:
        return None
    return entries[index]


def display_order(step: Step) -> list[IndexedEntry]:
    """Elected entry first, then the rest most-recent first, with history indices."""
    entries = current_entries(step)
    chosen = elected_index(step, entries)
    if chosen is None:
        return []
    others = [(index, entry) for index, entry in enumerate(entries) if index != chosen]
    return [(chosen, entries[chosen]), *reversed(others)]


def mirror(step: Step, entry: GradeEntry) -> Step:
    """Copy ``entry``'s score and reasoning onto the step's displayed fields."""
    if entry.source == "automated":
        return step.model_copy(
            update={
                "score": entry.score,
                "content": entry.reasoning,
                "is_human_graded": False,
            }
        )
    return step.model_copy(
        update={
            "score": entry.score,
            "human_note": entry.reasoning,
            "is_human_graded": True,
        }
    )


def _with_elected(
    step: Step, entries: tuple[GradeEntry, ...], chosen: int, at: datetime
) -> Step:
    flagged = tuple(
        entry.elected(at) if index == chosen else entry.unelected()
        for index, entry in enumerate(entries)
    )
    updated = step.model_copy(update={"grading_history": flagged})
    return mirror(updated, flagged[chosen])


def append_entry(step: Step, entry: GradeEntry, at: datetime) -> Step:
    """Append ``entry`` to the history and elect it.

    A legacy step's synthesized entry is written out as the first real item.
    """
    entries = current_entries(step) + (entry,)
    return _with_elected(step, entries, len(entries) - 1, at)


def elect_entry(step: Step, entry_index: int, at: datetime) -> Step:
    """Elect the entry at ``entry_index``; re-electing refreshes ``elected_at``.

    Raises:
        EntryIndexError: if the index is outside the history.
    """
    entries = current_entries(step)
    if not 0 <= entry_index < len(entries):
        raise EntryIndexError(
            step_id=step.id, entry_index=entry_index, history_size=len(entries)
        )
    return _with_elected(step, entries, entry_index, at)
