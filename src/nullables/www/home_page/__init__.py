"""Home page: the ROT-13 form."""
