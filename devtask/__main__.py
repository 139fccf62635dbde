"""Allow ``python -m devtask <command> [-- <args...>]``."""
from devtask.task_run import main

if __name__ == "__main__":
    main(prog_name="devtask")
