from shiny import ui


def table_view_output(view, title=None, container_class="table-view-container"):
    """
    Wrap a rendered TableView in a Shiny UI container.

    The markup is passed through ui.HTML, so it is inserted as-is. An invalid
    view configuration renders as an empty container.

    Args:
        view (TableView): The view to render.
        title (str, optional): Heading shown above the table.
        container_class (str): Class of the wrapping div.

    Returns:
        ui.Tag: A div containing the table markup.
    """
    content = [ui.HTML(view.render())]
    if title:
        content.insert(0, ui.h4(title, class_="table-view-title"))
    return ui.div(*content, class_=container_class)


def table_views_section(title, *views, titles=None):
    """
    Group several TableViews under one heading.

    Each view is wrapped with table_view_output; `titles`, when given, supplies
    one table heading per view (None skips a heading).

    Args:
        title (str): Title of the section.
        *views (TableView): Views rendered in the given order.
        titles (list, optional): Per-view headings, same length as `views`.

    Returns:
        ui.Tag: A styled section div.
    """
    if titles is None:
        titles = [None] * len(views)
    elif len(titles) != len(views):
        raise ValueError(f"Got {len(titles)} titles for {len(views)} views")

    return ui.div(
        ui.div(ui.h3(title, class_="table-views-title"), class_="table-views-header"),
        *(table_view_output(view, title=t) for view, t in zip(views, titles)),
        class_="table-views-section",
    )
