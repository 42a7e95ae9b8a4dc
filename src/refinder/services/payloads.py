"""JSON-ready payloads for published character updates."""
from __future__ import annotations

from typing import Any, Dict

from refinder.domain.character import Character, CharacterUpdate
from refinder.domain.loot import Event, Item, LootReward
from refinder.domain.zone import ZoneInfo, ZoneLink, ZoneNode

UpdatePayload = Dict[str, Any]


def update_to_payload(update: CharacterUpdate) -> UpdatePayload:
    """Return the camelCase payload sent to presentation subscribers."""
    return {
        "character": character_to_payload(update.character),
        "zone": zone_info_to_payload(update.zone),
    }


def character_to_payload(character: Character) -> Dict[str, Any]:
    return {
        "id": character.id,
        "archetype": character.archetype_label,
        "type": character.type,
        "items": sorted(character.owned_item_ids),
    }


def zone_info_to_payload(zone: ZoneInfo) -> Dict[str, Any]:
    return {
        "zoneActor": _zone_to_payload(zone.root) if zone.root is not None else None,
        "biome": zone.biome,
        "bloodMoon": zone.blood_moon,
    }


def _zone_to_payload(zone: ZoneNode) -> Dict[str, Any]:
    return {
        "id": zone.id,
        "parentZoneId": zone.parent_id,
        "questId": zone.quest_id,
        "label": zone.label,
        "zoneLinks": [_link_to_payload(link) for link in zone.links],
        "events": [_event_to_payload(event) for event in zone.events],
        "items": [_item_to_payload(item) for item in zone.items],
        "children": [_zone_to_payload(child) for child in zone.children],
    }


def _link_to_payload(link: ZoneLink) -> Dict[str, Any]:
    return {
        "zoneId": link.target_zone_id,
        "label": link.label,
        "type": link.link_type,
        "destinationLink": link.destination_link,
        "destinationZone": link.destination_zone,
        "nameId": link.name_id,
    }


def _item_to_payload(item: Item) -> Dict[str, Any]:
    return {
        "name": item.name,
        "properties": {
            "zoneId": item.source_zone_id,
            "id": item.id,
            "parentQuestId": item.parent_quest_id,
        },
        "ownedByCharacter": item.owned_by_character,
        "quantity": item.quantity,
    }


def _event_to_payload(event: Event) -> Dict[str, Any]:
    return {
        "name": event.name,
        "rewards": [_reward_to_payload(reward) for reward in event.rewards],
    }


def _reward_to_payload(reward: LootReward) -> Dict[str, Any]:
    return {
        "id": reward.sequence_id,
        "rewardId": reward.reward_group_id,
        "type": reward.type,
        "actorBp": reward.actor_blueprint_id,
        "quantity": reward.quantity,
        "persistenceKey": {
            "containerKey": reward.persistence_key.container_key,
            "persistentId": reward.persistence_key.persistent_id,
        },
        "ownedByCharacter": reward.owned_by_character,
    }
