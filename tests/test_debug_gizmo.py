from neta.debug_gizmo import (
    GIZMO_TIMEOUT,
    DebugGizmos,
    debug_gizmo,
    execute_gizmo_commands,
)


def test_command_runs_until_timeout():
    gizmos = DebugGizmos(timeout=1.0)
    calls = []
    gizmos.add(calls.append)
    gizmos.run("g", 0.4)
    gizmos.run("g", 0.4)
    assert calls == ["g", "g"]
    gizmos.run("g", 0.4)
    assert calls == ["g", "g"]
    assert len(gizmos) == 0


def test_expiry_is_per_command():
    gizmos = DebugGizmos(timeout=1.0)
    first, second = [], []
    gizmos.add(first.append)
    gizmos.run(None, 0.6)
    gizmos.add(second.append)
    gizmos.run(None, 0.6)
    assert len(first) == 1
    assert len(second) == 2
    assert len(gizmos) == 1


def test_shared_queue():
    calls = []
    debug_gizmo(calls.append)
    execute_gizmo_commands("frame", 0.0)
    assert calls == ["frame"]
    execute_gizmo_commands("frame", GIZMO_TIMEOUT)
    assert calls == ["frame"]