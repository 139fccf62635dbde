"""devtask -- command dispatcher for Rust service developer workflows."""
