"""
Chat app for direct and group chats.

This app handles:
- Chat lifecycle (create, update, leave, clear, delete)
- Membership and per-member deletion markers
- The per-viewer chat list (shown vs cleared chats)

Related apps:
    - authentication: User model for members, Profile for display data

Usage:
    from chat.services import ChatService, ChatVisibilityService

    # Create a direct chat
    result = ChatService.create_chat(viewer, member_ids=[other.id])

    # Create a group chat
    result = ChatService.create_chat(
        viewer, member_ids=[a.id, b.id], name="Team", is_group=True
    )

    # List chats
    listing = ChatVisibilityService.get_chats(viewer).data
"""
