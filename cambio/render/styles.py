"""
Injeção da folha de estilos de destaque e badge no documento.
"""

from cambio.core.constants import INJECTED_STYLES, STYLE_ELEMENT_ID
from cambio.document.live_document import LiveDocument


def ensure_styles_injected(document: LiveDocument) -> bool:
    """
    Garante um único <style> do sistema no documento.

    A checagem é por presença do id, então chamadas repetidas (ou várias
    instâncias do renderizador) não duplicam a folha.

    Returns:
        True se o elemento foi criado nesta chamada
    """
    if document.get_element_by_id(STYLE_ELEMENT_ID) is not None:
        return False

    head = document.head
    if head is None:
        head = document.create_element("head")
        container = document.soup.html or document.soup
        document.insert_child(container, 0, head)

    style = document.create_element("style", {"id": STYLE_ELEMENT_ID}, INJECTED_STYLES)
    document.append_child(head, style)
    document.logger.debug("Estilos injetados", style_id=STYLE_ELEMENT_ID)
    return True
