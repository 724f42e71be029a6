"""
fk init - Create storage layout and seed built-in prompts.
"""

from fastkit.tools import Toolbox


def cmd_init(args, toolbox: Toolbox) -> int:
    seeded = toolbox.initialize()
    print(f"Storage: {toolbox.config.home}")
    print(f"  prompts: {toolbox.config.prompts_dir}")
    print(f"  specs:   {toolbox.config.specs_dir}")
    if seeded:
        print(f"Seeded {seeded} built-in prompt(s)")
    else:
        print("Built-in prompts already present")
    return 0
