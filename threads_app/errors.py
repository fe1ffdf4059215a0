class ActionError(Exception):
    """
    Raised by every server action when the underlying operation fails.

    The message is ``"<operation>: <original message>"``; the original
    exception stays available as ``__cause__``.
    """

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation}: {detail}" if detail else operation)


class ThreadNotFoundError(ActionError):
    """The thread a reply targets does not exist."""

    def __init__(self, thread_id: str):
        self.thread_id = thread_id
        super().__init__("Thread not found")
