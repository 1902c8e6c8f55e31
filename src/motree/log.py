import logging

# note, the trees never print anything on their own.
# recoverable conditions (like deleting from an empty tree)
# are reported as WARNING through the logger below
# , structural events (split, merge, root collapse) as DEBUG.
#
# you can use following code in your project
# to see the structural events for example
#
# import motree
# motree.log.set_level(logging.DEBUG)
#

# basic setting
logging.basicConfig(
    level=logging.WARNING,
    format='%(levelname)s|%(asctime)s|%(message)s',
)

# global logger used by `motree`
logger = logging.getLogger("motree_logger")


def set_level(level):
    # accepts logging.DEBUG or 'DEBUG' alike
    logger.setLevel(level)
    return logger.level
