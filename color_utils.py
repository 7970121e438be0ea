"""
Color scheme of the correlation report figures
Light theme only
"""

# Fixed order: sets and methods get the same color on every figure
_PALETTE = [
    'black', 'red', 'green', 'blue', 'orange', 'purple', 'brown', 'hotpink',
    'gray', 'olive', 'cyan', 'magenta', 'gold', 'navy', 'teal', 'crimson'
]


def get_unified_color_schemes():
    """
    Colors read by the correlation plots

    Returns:
        dict: figure background and grid, point and highlight colors, trend
        line colors
    """
    return {
        'background': 'white',
        'paper': 'white',
        'text': 'black',
        'grid': '#e6e6e6',
        'point_color': 'blue',
        'highlight_color': 'red',
        'fit_line': 'black',
        # [without outlier, with outlier]
        'line_colors': ['blue', 'red'],
    }


def _palette_color(i):
    if i < len(_PALETTE):
        return _PALETTE[i]
    # Past the palette: spread hues with the golden angle
    return f'hsl({(i * 137) % 360}, 70%, 50%)'


def create_categorical_color_map(unique_values):
    """
    Color per group label, assigned in sorted order

    Args:
        unique_values (iterable): Group labels ('Set 1', 'Set 2', ...)

    Returns:
        dict: Mapping of label to color
    """
    return {value: _palette_color(i) for i, value in enumerate(sorted(unique_values))}


def get_method_colors(methods):
    """
    Annotation colors for correlation methods, in the given order

    Black is kept for the trend line, so method colors start after it.
    """
    return {method: _palette_color(i + 1) for i, method in enumerate(methods)}
