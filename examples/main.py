# examples/main.py
"""
Run docrest programmatically with a local storage root.
"""

import uvicorn

from docrest import DocRest, DocRestConfig
from docrest.core.logging import color_palette, log

config = DocRestConfig(project_name="My Documents", root="./data", port=8000, debug_mode=True)
log.debug_enabled = config.debug_mode
docrest = DocRest(config)
app = docrest.generate_all()

# Handles can be resolved ahead of the first request
log.section("Warming registry")
with log.indented():
    for name in ("inventory", "orders"):
        database = docrest.resolve_database(name)
        model = docrest.resolve_model("items", database)
        log.success(f"Ready: {color_palette['database'](name)}.{color_palette['collection'](model.name)}")


def run():
    docrest.print_welcome()
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
