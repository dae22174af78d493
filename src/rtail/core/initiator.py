from __future__ import annotations

import logging

from .model import FetchState, SizeSpec

logger = logging.getLogger(__name__)


def _offset_from_size(state: FetchState, spec: SizeSpec, size: int | None) -> FetchState:
    if size is None:
        # unknown size: fall back to the whole resource
        logger.warning("%s: size unknown, tailing from the beginning", state.resource)
        state.offset = 0
    else:
        state.offset = max(size - spec.magnitude, 0)
    logger.info("%s: starting at offset %d", state.resource, state.offset)
    return state


def initiate(resource: str, spec: SizeSpec, transport) -> FetchState:
    """Create the FetchState for `resource`, probing its size if needed.

    An absolute ("+N") spec needs no network access; otherwise a
    metadata-only request finds the size and the tail starts
    ``spec.magnitude`` bytes before its end.
    """
    state = FetchState(resource)
    if spec.anchored_from_start:
        state.offset = spec.magnitude
        logger.info("%s: starting at offset %d", resource, state.offset)
        return state
    return _offset_from_size(state, spec, transport.probe_size(resource))


async def initiate_async(resource: str, spec: SizeSpec, transport) -> FetchState:
    """Async twin of `initiate` for an AsyncTransport."""
    state = FetchState(resource)
    if spec.anchored_from_start:
        state.offset = spec.magnitude
        logger.info("%s: starting at offset %d", resource, state.offset)
        return state
    return _offset_from_size(state, spec, await transport.probe_size(resource))
