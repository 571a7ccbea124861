"""Interactive entry points: the chooser loop and the read-input wrapper."""

from __future__ import annotations

import functools
from collections.abc import AsyncIterable, Awaitable, Callable
from typing import Any

from pi.choose.host import HostSurface
from pi.choose.keymap import ChooseKeymap, get_choose_keymap, run_action
from pi.choose.session import CompletionAborted, Session
from pi.choose.sources import Matcher

ReadInput = Callable[..., Awaitable[str]]


async def choose(
    surface: HostSurface,
    keys: AsyncIterable[str],
    matcher: Matcher,
    *,
    keymap: ChooseKeymap | None = None,
    edit: Callable[[str], Any] | None = None,
    **options: Any,
) -> str:
    """Run one chooser session over the raw key data in *keys*.

    Keys bound in *keymap* run chooser actions; everything else goes to
    *edit* (by default the surface's own ``handle_input``). Returns the
    committed string. Raises ``CompletionAborted`` on cancel, on matcher
    failure, or when *keys* runs out before a commit.
    """
    keymap = keymap if keymap is not None else get_choose_keymap()
    if edit is None:
        edit = getattr(surface, "handle_input", None)
    session = Session(surface, matcher, **options)

    await session.update(force=True)
    session.paint()

    try:
        async for data in keys:
            action = keymap.action_for(data)
            if action is not None:
                result = run_action(session, action)
                if result is not None and result.done:
                    return result.value or ""
            elif edit is not None:
                edit(data)
            await session.update()
            session.paint()
    except KeyboardInterrupt:
        session.abort()

    if session.active:
        session.abort("Input ended")
    raise CompletionAborted("Input ended")


def completing(read_input: ReadInput) -> ReadInput:
    """Wrap a host read-input coroutine so completing reads use ``choose()``.

    Calls that pass ``matcher=`` are served by the chooser, which ignores the
    host's own positional arguments (prompt and the like); all other calls
    reach *read_input* unchanged.
    """

    @functools.wraps(read_input)
    async def wrapper(
        surface: HostSurface,
        keys: AsyncIterable[str],
        *args: Any,
        matcher: Matcher | None = None,
        **kwargs: Any,
    ) -> str:
        if matcher is None:
            return await read_input(surface, keys, *args, **kwargs)
        return await choose(surface, keys, matcher, **kwargs)

    return wrapper
