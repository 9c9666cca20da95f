import pytest

from launcher_store.versions.guards import GuardState, OperationGuard
from launcher_store.versions.pipeline import Stage, StagePipeline


class TestOperationGuard:
    def test_second_start_is_rejected_until_finished(self):
        guard = OperationGuard("fetch")

        assert guard.try_start() is True
        assert guard.state is GuardState.BUSY
        assert guard.try_start() is False

        guard.finish()

        assert guard.state is GuardState.IDLE
        assert guard.try_start() is True

    def test_starts_idle(self):
        guard = OperationGuard("fetch")

        assert guard.busy is False


class TestStagePipeline:
    @pytest.mark.asyncio
    async def test_each_stage_receives_previous_output(self):
        async def double(value):
            return value * 2

        async def describe(value):
            return f"value={value}"

        pipeline = StagePipeline(
            "demo", [Stage("double", double), Stage("describe", describe)]
        )

        assert await pipeline.run(21) == "value=42"

    @pytest.mark.asyncio
    async def test_first_failure_stops_the_run(self):
        calls = []

        async def ok(_):
            calls.append("ok")

        async def boom(_):
            calls.append("boom")
            raise RuntimeError("stage failed")

        async def never(_):
            calls.append("never")

        pipeline = StagePipeline(
            "demo", [Stage("ok", ok), Stage("boom", boom), Stage("never", never)]
        )

        with pytest.raises(RuntimeError, match="stage failed"):
            await pipeline.run()

        assert calls == ["ok", "boom"]
