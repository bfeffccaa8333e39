from common.hooks import HookManager


def test_execute_without_listeners_returns_default():
    bus = HookManager()
    assert bus.execute("cart.discounts.get", []) == []
    assert bus.execute("anything") is None
    assert not bus.has_listeners("anything")


def test_listeners_fold_in_priority_then_registration_order():
    bus = HookManager()
    bus.register("trail", lambda value, ctx: value + ["late"], priority=20)
    bus.register("trail", lambda value, ctx: value + ["first"], priority=5)
    bus.register("trail", lambda value, ctx: value + ["tie-a"])
    bus.register("trail", lambda value, ctx: value + ["tie-b"])

    assert bus.execute("trail", []) == ["first", "tie-a", "tie-b", "late"]


def test_listeners_receive_context():
    bus = HookManager()
    bus.register("ctx", lambda value, ctx: value + ctx["step"])

    assert bus.execute("ctx", 1, {"step": 2}) == 3


def test_unregister_removes_only_that_listener():
    bus = HookManager()

    def keep(value, ctx):
        return value + 1

    def drop(value, ctx):
        return value + 100

    bus.register("count", keep)
    bus.register("count", drop)
    bus.unregister("count", drop)

    assert bus.listeners("count") == [keep]
    assert bus.execute("count", 0) == 1
