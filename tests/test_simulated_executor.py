import asyncio
from webagent.actions.simulated import SimulatedExecutor

def test_simulated_executor_records_and_logs():
    lines = []
    ex = SimulatedExecutor("linkedin", on_log=lines.append)

    async def go():
        await ex.navigate("/feed")
        await ex.click("post-button")
        await ex.type("hello")
        await ex.wait(500)

    asyncio.run(go())
    assert ex.actions == [("navigate", "/feed"), ("click", "post-button"), ("type", "hello"), ("wait", 500)]
    assert lines == [
        "Navigating to: /feed",
        "Clicking element: button.share-actions__primary-action",
        "Typing: hello",
    ]
