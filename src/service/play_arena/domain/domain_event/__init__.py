"""Domain Events"""

from src.service.play_arena.domain.domain_event.notification_message import NotificationMessage

__all__ = ['NotificationMessage']
