"""
Stream — single-value streams over completion-style operations.

    from oneshot import stream as St

    users = St.single(api.login).flat_map(lambda cred: St.single(fetch(cred)))
    disposable = users.subscribe(on_success, on_failure)
    outcome = await users.to_result()
"""

from __future__ import annotations

from oneshot.stream._single import Observer, Disposable, Single, single

__all__ = (
    "Observer",
    "Disposable",
    "Single",
    "single",
)
