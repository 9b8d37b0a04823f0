"""CLI entry point for the journey map engine."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from journeymap.config import load_config
from journeymap.db import JourneyMapDB
from journeymap.errors import JourneyMapError
from journeymap.generation import AnthropicGenerationService
from journeymap.models import GenerationContext, JobToBeDone, JobType
from journeymap.output import map_queries as mq
from journeymap.session import EditingSession


def _print_map(data: dict[str, object]) -> None:
    print(f"{data['title']}")
    if data.get("subtitle"):
        print(f"  {data['subtitle']}")
    for step in data["steps"]:  # type: ignore[union-attr]
        print(
            f"  {step['order']}. {step['title'] or '(untitled)'} "
            f"[day {step['timelineDay']}] pain {step['negativeExperience']} / "
            f"opportunity {step['positiveExperience']}"
        )
        if step.get("painPointNote"):
            print(f"     ! {step['painPointNote']}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Journey Map Engine")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # list command
    list_parser = sub.add_parser("list", help="List journey maps for an idea")
    list_parser.add_argument("idea_id", help="Idea the maps belong to")

    # show command
    show_parser = sub.add_parser("show", help="Show a journey map with its steps")
    show_parser.add_argument("map_id")
    show_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    # generate command
    gen_parser = sub.add_parser("generate", help="Generate a journey map draft with AI")
    gen_parser.add_argument("idea_id", help="Idea the map belongs to")
    gen_parser.add_argument("--customer", required=True, help="Who is trying to make progress")
    gen_parser.add_argument("--progress", required=True, help="The progress they want")
    gen_parser.add_argument("--circumstance", required=True, help="When/where they need it")
    gen_parser.add_argument(
        "--job-type", choices=[t.value for t in JobType], default=JobType.FUNCTIONAL.value,
    )
    gen_parser.add_argument("--idea-title", default=None)
    gen_parser.add_argument("--idea-description", default=None)
    gen_parser.add_argument("--vision", default=None, help="Product vision for company context")
    gen_parser.add_argument("--business-model", default=None, help="Core business model for company context")
    gen_parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the merged draft without saving it",
    )

    # add-step command
    add_parser = sub.add_parser("add-step", help="Append a default step to a saved map")
    add_parser.add_argument("map_id")

    # remove-step command
    remove_parser = sub.add_parser("remove-step", help="Remove a step (0-based index) from a saved map")
    remove_parser.add_argument("map_id")
    remove_parser.add_argument("index", type=int)

    # chart command
    chart_parser = sub.add_parser("chart", help="Render a journey map chart to PNG")
    chart_parser.add_argument("map_id")
    chart_parser.add_argument("-o", "--output-dir", type=Path, default=None)

    # delete command
    delete_parser = sub.add_parser("delete", help="Delete a journey map")
    delete_parser.add_argument("map_id")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    db = JourneyMapDB(config)
    db.init_db()

    try:
        if args.command == "list":
            maps = mq.list_journey_maps(args.idea_id, db)
            if not maps:
                print(f"No journey maps for idea {args.idea_id}.")
                return
            for m in maps:
                print(
                    f"  {m['id']}  {m['title']} ({m['step_count']} steps, "
                    f"{m['span_days']} days, updated {m['updated_at']})"
                )

        elif args.command == "show":
            data = mq.get_journey_map(args.map_id, db)
            if args.json:
                print(json.dumps(data, indent=2))
            else:
                _print_map(data)

        elif args.command == "generate":
            context = GenerationContext(
                job=JobToBeDone(
                    customer=args.customer,
                    progress=args.progress,
                    circumstance=args.circumstance,
                    type=JobType(args.job_type),
                ),
                idea_title=args.idea_title,
                idea_description=args.idea_description,
                vision=args.vision,
                business_model=args.business_model,
            )
            session = asyncio.run(mq.generate_journey_map(
                args.idea_id, context, db, config,
                AnthropicGenerationService(config.llm),
                save=not args.dry_run,
            ))
            _print_map(session.snapshot())
            if session.map_id:
                print(f"\nSaved as {session.map_id}")

        elif args.command == "add-step":
            session = EditingSession.open(db, args.map_id, config=config)
            step = session.add_step()
            asyncio.run(session.save())
            print(f"Added step {step.order} at day {step.timeline_day}")

        elif args.command == "remove-step":
            session = EditingSession.open(db, args.map_id, config=config)
            session.remove_step(args.index)
            asyncio.run(session.save())
            print(f"Removed step at index {args.index}; {len(session.steps)} steps remain")

        elif args.command == "chart":
            path = mq.render_journey_chart(args.map_id, db, config, output_dir=args.output_dir)
            print(f"Output: {path}")

        elif args.command == "delete":
            result = mq.delete_journey_map(args.map_id, db)
            print(result["message"])

        else:
            parser.print_help()
    except JourneyMapError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
