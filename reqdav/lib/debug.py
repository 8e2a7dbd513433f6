from lxml import etree


def xmlstring(root):
    if isinstance(root, str):
        return root
    try:
        return etree.tostring(root, pretty_print=True).decode("utf-8")
    except TypeError:
        return str(root)
