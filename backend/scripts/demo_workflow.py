#!/usr/bin/env python3
"""
Demo script — drive the workflow locally without the HTTP API.

Loads a file (or a built-in sample), prints a filtered / sorted view,
then runs the workflow twice: once with a step that fails, followed by a
re-run of that step, and once with the random executor.

Usage:
    cd backend
    python -m scripts.demo_workflow [path/to/file.csv]
"""

import asyncio
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

SAMPLE_ROWS = [
    {"order_id": 1003, "customer": "Acme Corp", "region": "North", "amount": 1250.5},
    {"order_id": 1001, "customer": "Globex", "region": "South", "amount": 980},
    {"order_id": 1004, "customer": "Initech", "region": None, "amount": 310.25},
    {"order_id": 1002, "customer": "Umbrella", "region": "North", "amount": 4400},
    {"order_id": 1005, "customer": "Hooli", "region": "East", "amount": None},
]


def _load(controller, argv):
    if len(argv) > 1:
        if not controller.load_file(argv[1]):
            print(f"  ✗ Could not load {argv[1]}: {controller.dataset_error}")
            return False
        return True
    return controller.load_dataset(SAMPLE_ROWS, source="sample")


def _print_view(controller):
    """DEMO 1: search + filter + sort over the loaded rows."""
    print("\n" + "=" * 70)
    print("  DEMO 1: Table view (filter region=north, sort by amount desc)")
    print("=" * 70)

    controller.add_filter("region", "north")
    controller.toggle_sort("amount")
    controller.toggle_sort("amount")
    result = controller.view()

    print(f"\n  Showing {len(result.rows)} of {result.total_rows} rows")
    print("  " + " | ".join(result.columns))
    for cells in result.display_rows():
        print("  " + " | ".join(cells))

    controller.clear_filters()


def _print_event(event):
    if event.type == "notice":
        icon = {"success": "✓", "error": "✗"}.get(event.level, "ℹ")
        print(f"    {icon} {event.message}")
    elif event.type == "workflow_complete":
        print(f"    ■ run finished: {event.outcome} (overall {event.snapshot.overall_progress}%)")


def _print_steps(snapshot):
    print(f"\n{'─' * 50}")
    for step in snapshot.steps:
        icon = "✓" if step.status == "completed" else "✗" if step.status == "failed" else "⊘"
        print(f"    {icon} {step.id}. {step.name:<22} {step.status:<10} {step.progress:>3}%")
    print(f"  Overall progress : {snapshot.overall_progress}%")
    print(f"{'─' * 50}\n")


async def run_scripted_workflow(controller):
    """DEMO 2: step 2 fails once, then a re-run completes the workflow."""
    print("\n" + "=" * 70)
    print("  DEMO 2: Scripted executor (step 2 fails, then re-run)")
    print("=" * 70 + "\n")

    controller.start()
    await controller.join()
    _print_steps(controller.snapshot())

    print("  Re-running step 2...\n")
    controller.rerun(2)
    await controller.join()
    _print_steps(controller.snapshot())


async def run_random_workflow(controller):
    """DEMO 3: 90/10 random outcomes."""
    print("\n" + "=" * 70)
    print("  DEMO 3: Random executor (90% success per step)")
    print("=" * 70 + "\n")

    controller.start()
    await controller.join()
    _print_steps(controller.snapshot())


async def main():
    from tabflow.core.constants import StepOutcome
    from tabflow.core.logging import setup_logging
    from tabflow.pipeline import RandomStepExecutor, ScriptedStepExecutor, WorkflowController
    setup_logging("WARNING")     # quiet logs, show formatted output only

    print("\n╔" + "═" * 68 + "╗")
    print("║            TABFLOW — DATA VIEW & WORKFLOW ENGINE DEMO             ║")
    print("╚" + "═" * 68 + "╝")

    scripted = WorkflowController(
        executor=ScriptedStepExecutor({2: [StepOutcome.FAILURE, StepOutcome.SUCCESS]}),
        tick_interval=0.02,
    )
    scripted.subscribe(_print_event)
    if not _load(scripted, sys.argv):
        return

    _print_view(scripted)
    await run_scripted_workflow(scripted)
    await scripted.aclose()

    randomised = WorkflowController(executor=RandomStepExecutor(), tick_interval=0.02)
    randomised.subscribe(_print_event)
    _load(randomised, sys.argv)
    await run_random_workflow(randomised)
    await randomised.aclose()

    print("\n✅ All demos completed!\n")


if __name__ == "__main__":
    asyncio.run(main())
