from dupsieve.core.hasher import ALGORITHMS

DIGEST_CHOICES = list(ALGORITHMS.keys())

DIGEST_HELP_TEXT = (
    "Content digest used to bucket candidate files:\n"
    "  xxh128 : 128-bit xxHash3 (default, fastest)\n"
    "  xxh64  : 64-bit xxHash\n"
    "  md5    : MD5\n"
    "Files sharing a digest are always compared byte by byte before any action."
)

ACTION_HELP_TEXT = (
    "Actions (default is to list each set of duplicates):\n"
    "  --link   replace duplicates with hard links to the first file of the set\n"
    "  --delete choose interactively which files of each set to delete"
)

EPILOG_TEXT = """
Examples:
  List duplicate files in a directory tree
  %(prog)s -r ~/Downloads

  Same as above, one set per line with file sizes
  %(prog)s -r -1 -S ~/Downloads

  Consolidate duplicates into hard links, ignoring empty files
  %(prog)s -r -n --link ~/photos ~/backup/photos

  Pick files to delete for each set, moving them to the trash
  %(prog)s -r --delete --trash ~/Documents

  Read file names from another program
  find ~/music -name '*.mp3' | %(prog)s -i

Exit status is the number of paths that could not be read.
"""
