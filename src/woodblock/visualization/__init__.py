"""pygame front end for Wood Block."""
