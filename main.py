import asyncio

from helmsman import *

PROJECTS = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot"]


def create(context):
    if context.argument is None or is_flag(context.argument):
        return context.session.error("a project name is required")
    prefix = "dry run" if context.options.get("dry-run") else ""
    context.session.success(f"created {context.argument}", prefix)


def listing(context):
    """list the known projects one page at a time"""
    session = context.session

    async def show(page):
        ordered = PROJECTS if page.order == "asc" else PROJECTS[::-1]
        start = (page.number - 1) * page.limit
        chunk = ordered[start:start + page.limit]
        page = await session.paginate(chunk, page, page.limit)
        if page is not None:
            await show(page)

    return show(PageInfo(offset=0, limit=2))


async def remove(context):
    """remove a project after confirmation"""
    name = context.argument or await context.session.ask("project name?")
    if await context.session.confirm(f"remove {name}?", False):
        await asyncio.sleep(0)
        context.session.success({"removed": name})


def leave(context):
    """leave the interactive session"""
    context.session.exit(0, override=True)


commands = {
    "options": [
        {"option": {"short": "v", "long": "verbose"}, "help": "print more details"},
    ],
    "create": {
        "execute": create,
        "help": "create a new project",
        "input": "<name>",
        "options": [
            {"option": {"long": "dry-run"}, "help": "do not write anything"},
        ],
    },
    "list": listing,
    "remove": {"execute": remove, "help": "remove a project", "input": "[name]"},
    "deep": {
        "nesting": {
            "works": {
                "as": {
                    "command": {
                        "execute": lambda context: context.session.success(
                            "to run this type `deep nesting works as command`"
                        ),
                        "help": "help of command",
                    },
                },
            },
        },
    },
    "quit": leave,
}


if __name__ == '__main__':
    raise SystemExit(invoke(
        commands,
        header="This is shown in the header",
        footer="This is shown in the footer",
        binary="main.py",
    ))
