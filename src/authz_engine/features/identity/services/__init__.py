from .attribute_updater import AttributeUpdater

__all__ = ["AttributeUpdater"]
