# local imports
import motree.constant


def make_indent(level):
    return motree.constant.INDENT_TEMPLATE * level


def format_keys(keys):
    # the group notation used everywhere a bnode is shown
    # , for example, [10, 20] becomes '[ 10 20 ]'
    return '[ ' + ''.join(f'{k} ' for k in keys) + ']'


def render_lines(lines):
    # lines are (level, text) pairs
    return '\n'.join(
        make_indent(level) + text
        for level, text in lines
    )
