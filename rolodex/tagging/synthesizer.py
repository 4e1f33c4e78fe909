"""
Tag synthesis: batches changed contacts through the tagging service.

Batches run strictly one after another. Each batch sees the vocabulary as it
stood after the previous batch, so a tag invented in batch 1 can be reused in
batch 2. A batch that fails (network error, bad JSON, wrong shape) is
recorded as a BatchFailure and contributes nothing; later batches still run.

File: tagging/synthesizer.py
Created: 2026-10-13
Last Modified: 2026-10-18
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from ..llm import SYSTEM_PROMPT, TaggingClient, build_user_message
from ..models import (
    BatchFailure,
    BatchResult,
    BatchSuccess,
    DeviceContact,
    SynthesisResult,
    TagAssignment,
)

log = logging.getLogger(__name__)
console = Console()

DEFAULT_BATCH_SIZE = 35

T = TypeVar("T")


class MalformedResponseError(ValueError):
    """The tagging service replied with something other than the expected JSON shape."""


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Split items into consecutive lists of at most `size`."""
    if size < 1:
        raise ValueError(f"Batch size must be positive, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def build_batch_payload(batch: List[DeviceContact], vocabulary: List[str]) -> Dict[str, Any]:
    """Request payload for one batch."""
    return {
        "contacts": [
            {
                "true_id": c.true_id,
                "name": c.name or "",
                "company": c.company or "",
                "jobTitle": c.job_title or "",
            }
            for c in batch
        ],
        "existing_tags": list(vocabulary),
    }


def parse_tag_response(text: Optional[str]) -> List[TagAssignment]:
    """
    Parse the service's reply into tag assignments.

    Args:
        text: Raw reply text

    Returns:
        One TagAssignment per usable entry. An entry whose `tags` is not a
        list gets an empty tag list.

    Raises:
        MalformedResponseError: If the reply is empty, not JSON, or has no
            `contacts` list
    """
    if not text:
        raise MalformedResponseError("Empty response")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("contacts"), list):
        raise MalformedResponseError("Response has no 'contacts' list")

    assignments = []
    for entry in data["contacts"]:
        if not isinstance(entry, dict):
            continue
        true_id = entry.get("true_id")
        if not isinstance(true_id, str) or not true_id:
            continue

        raw_tags = entry.get("tags")
        if not isinstance(raw_tags, list):
            raw_tags = []

        tags = []
        for tag in raw_tags:
            if isinstance(tag, str) and tag.strip():
                tags.append(tag.strip())

        assignments.append(TagAssignment(true_id=true_id, tags=tags))

    return assignments


def extend_vocabulary(vocabulary: List[str], assignments: List[TagAssignment]) -> List[str]:
    """Return a new vocabulary with unseen tags appended in first-seen order."""
    extended = list(vocabulary)
    seen = set(extended)
    for assignment in assignments:
        for tag in assignment.tags:
            if tag not in seen:
                seen.add(tag)
                extended.append(tag)
    return extended


async def tag_batch(
    client: TaggingClient,
    batch: List[DeviceContact],
    vocabulary: List[str],
    batch_index: int = 0,
) -> BatchResult:
    """
    Send one batch to the tagging service.

    Args:
        client: Tagging client
        batch: Contacts in this batch
        vocabulary: Tags known so far
        batch_index: Position of the batch in the run (for logs and results)

    Returns:
        BatchSuccess with the parsed assignments, or BatchFailure with the reason
    """
    payload = build_batch_payload(batch, vocabulary)
    log.debug(f"Sending batch {batch_index} to tagging service: {json.dumps(payload)}")

    try:
        text = await client.complete_json(SYSTEM_PROMPT, build_user_message(payload))
        assignments = parse_tag_response(text)
    except Exception as e:
        reason = f"{type(e).__name__}: {e}"
        log.error(f"Dropping batch {batch_index} ({len(batch)} contacts): {reason}")
        return BatchFailure(
            batch_index=batch_index,
            true_ids=[c.true_id for c in batch if c.true_id],
            reason=reason,
        )

    log.debug(f"Batch {batch_index} tags: {[a.model_dump() for a in assignments]}")
    return BatchSuccess(batch_index=batch_index, assignments=assignments)


async def synthesize_tags(
    client: TaggingClient,
    contacts: List[DeviceContact],
    vocabulary: List[str],
    batch_size: int = DEFAULT_BATCH_SIZE,
    show_progress: bool = False,
) -> SynthesisResult:
    """
    Tag every contact, batch by batch.

    Args:
        client: Tagging client
        contacts: Changed contacts to tag
        vocabulary: Tag names already in the store
        batch_size: Contacts per request
        show_progress: Show a rich progress bar

    Returns:
        SynthesisResult with all successful assignments, the grown vocabulary,
        and one result per batch
    """
    batches = chunk(contacts, batch_size)
    result = SynthesisResult(vocabulary=list(vocabulary))

    async def run_batch(index: int, batch: List[DeviceContact]) -> None:
        batch_result = await tag_batch(client, batch, result.vocabulary, batch_index=index)
        result.batches.append(batch_result)
        if isinstance(batch_result, BatchSuccess):
            result.assignments.extend(batch_result.assignments)
            result.vocabulary = extend_vocabulary(result.vocabulary, batch_result.assignments)

    if show_progress and batches:
        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("•"),
            TextColumn("[red]{task.fields[failed]}[/] failed"),
            TextColumn("•"),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        ) as progress:
            task = progress.add_task("Tagging contacts", total=len(batches), failed=0)
            for index, batch in enumerate(batches):
                await run_batch(index, batch)
                progress.update(task, advance=1, failed=len(result.failed_batches))
    else:
        for index, batch in enumerate(batches):
            await run_batch(index, batch)

    log.info(
        f"Tagged {len(contacts)} contacts in {len(batches)} batches "
        f"({len(result.failed_batches)} failed); vocabulary {len(vocabulary)} -> {len(result.vocabulary)}"
    )
    return result
