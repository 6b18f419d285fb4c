import pathlib

local_db_dir = pathlib.Path("/var/lib/pacman/local")

desc_file_name = "desc"
mtree_file_name = "mtree"
files_file_name = "files"

# Placeholder used in error messages before %NAME% has been seen
unknown_pkg_name = "<unknown>"
