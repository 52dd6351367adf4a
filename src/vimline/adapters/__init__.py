"""Host adapters for the modal editing overlay."""
