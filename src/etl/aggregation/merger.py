"""Merge policy for repeated film sightings.

The upstream API returns the same film once per country where it is
available, with otherwise identical metadata. A film's identity is its
``id``; country availability is the only field merged across sightings.
"""

import logging

from src.etl.aggregation.schemas import Film

logger = logging.getLogger(__name__)


def union_countries(existing: list[str], incoming: list[str]) -> list[str]:
    """Ordered union of two country lists.

    Args:
        existing: Countries already recorded, kept first and in order.
        incoming: Countries from the new sighting.

    Returns:
        New list with every country once.
    """
    merged = list(dict.fromkeys(existing))
    for country in incoming:
        if country not in merged:
            merged.append(country)
    return merged


def merge_sighting(existing: Film | None, sighting: Film) -> Film:
    """Fold one sighting into the film seen so far for the same id.

    First-seen wins for every field except ``available_countries``,
    which is unioned. Inputs are never mutated.

    Args:
        existing: Film already aggregated for this id, if any.
        sighting: Newly normalized film for the same id.

    Returns:
        The merged film.

    Raises:
        ValueError: If both films carry different ids.
    """
    if existing is None:
        return sighting.model_copy(
            update={"available_countries": union_countries([], sighting.available_countries)}
        )

    if existing.id != sighting.id:
        raise ValueError(f"Cannot merge film {sighting.id} into film {existing.id}")

    if existing.title != sighting.title:
        logger.debug(
            "Film %s: keeping first-seen title %r over %r",
            existing.id,
            existing.title,
            sighting.title,
        )

    return existing.model_copy(
        update={
            "available_countries": union_countries(
                existing.available_countries,
                sighting.available_countries,
            )
        }
    )
