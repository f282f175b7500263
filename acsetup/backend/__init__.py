"""acsetup backend: detection, handlers and the setup step pipeline."""
