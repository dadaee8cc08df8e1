"""Qt front-end for the ASAP crop engine."""
