"""Apply a local change first, confirm it remotely, roll back if that fails."""


async def optimistic(snapshot, apply, commit, restore):
    """Run an optimistic mutation.

    Args:
        snapshot: Returns the state to restore on failure.
        apply: Performs the local change.
        commit: Zero-argument coroutine function performing the remote call.
        restore: Receives the snapshot when ``commit`` fails or is cancelled.

    Returns whatever ``commit`` returns; its failure is re-raised after the
    rollback.
    """
    saved = snapshot()
    apply()
    try:
        return await commit()
    except BaseException:
        restore(saved)
        raise
