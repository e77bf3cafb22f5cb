"""Multi-platform publishing for Facebook, Instagram, X, TikTok and Amazon Posts.

Usage:
    from socials_publisher.publishing.orchestrator import PublishingOrchestrator

    orchestrator = PublishingOrchestrator()
    result = await orchestrator.dispatch("twitter", record, content)
"""

__version__ = "0.1.0"
