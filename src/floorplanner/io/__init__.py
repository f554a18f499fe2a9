"""Reading and writing floor plan documents."""
