from accounts.infra.mail.smtp_notifier import SMTPNotifier

__all__ = ["SMTPNotifier"]
