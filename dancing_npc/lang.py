# dancing_npc/lang.py


class Lang:
    NoPermission = "NoPermission"
    GesturePlayedOnNewNPC = "GesturePlayedOnNewNPC"
    GestureUpdatedOnExistingNPC = "GestureUpdatedOnExistingNPC"
    GestureChanged = "GestureChanged"
    GestureNotFound = "GestureNotFound"
    GestureIndexOutOfRange = "GestureIndexOutOfRange"
    NoGesturesConfigured = "NoGesturesConfigured"
    GearSetNotFound = "GearSetNotFound"
    GearChanged = "GearChanged"
    GearNotApplied = "GearNotApplied"
    GearFailed = "GearFailed"
    MaxNPCsReached = "MaxNPCsReached"
    NoNPCInSight = "NoNPCInSight"
    NPCRemoved = "NPCRemoved"
    NPCsCleared = "NPCsCleared"
    NoNPCsToClear = "NoNPCsToClear"
    SpawnFailed = "SpawnFailed"
    GestureList = "GestureList"
    GestureListEntry = "GestureListEntry"
    GearList = "GearList"
    GearListEntry = "GearListEntry"
    ListEmpty = "ListEmpty"
    MissingArgument = "MissingArgument"
    Help = "Help"


NONE_LABEL = "none"

MESSAGES = {
    Lang.NoPermission: "You do not have permission to use this command.",
    Lang.GesturePlayedOnNewNPC: "Spawned a new npc and played gesture <color=#ADFF2F>{0}</color> with gear set <color=#ADFF2F>{1}</color>.",
    Lang.GestureUpdatedOnExistingNPC: "Updated gesture to <color=#ADFF2F>{0}</color> on the existing npc with gear set <color=#ADFF2F>{1}</color>.",
    Lang.GestureChanged: "The npc now plays gesture <color=#ADFF2F>{0}</color>.",
    Lang.GestureNotFound: "Gesture <color=#ADFF2F>{0}</color> not found. Please specify a valid gesture.",
    Lang.GestureIndexOutOfRange: "There is no gesture number <color=#ADFF2F>{0}</color>. Use <color=#ADFF2F>/{1} dances</color> to see the list.",
    Lang.NoGesturesConfigured: "No gestures are configured.",
    Lang.GearSetNotFound: "Gear set <color=#ADFF2F>{0}</color> not found. Please specify a valid gear set.",
    Lang.GearChanged: "The npc now wears gear set <color=#ADFF2F>{0}</color>.",
    Lang.GearNotApplied: "Gear set <color=#ADFF2F>{0}</color> was saved but could not be applied right now.",
    Lang.GearFailed: "Failed to equip gear set <color=#ADFF2F>{0}</color>.",
    Lang.MaxNPCsReached: "You already have <color=#ADFF2F>{0}</color> dancing npcs.",
    Lang.NoNPCInSight: "You are not looking at one of your dancing npcs.",
    Lang.NPCRemoved: "Removed the dancing npc.",
    Lang.NPCsCleared: "Removed <color=#ADFF2F>{0}</color> dancing npcs.",
    Lang.NoNPCsToClear: "You do not have any dancing npcs.",
    Lang.SpawnFailed: "The npc could not be spawned.",
    Lang.GestureList: "Gestures:",
    Lang.GestureListEntry: "{0}. {1}",
    Lang.GearList: "Gear sets:",
    Lang.GearListEntry: "- {0}",
    Lang.ListEmpty: "(none)",
    Lang.MissingArgument: "Usage: /{0} {1}",
    Lang.Help: (
        "Dancing NPC commands:\n"
        "/{0} add [gesture] [gear set] - spawn a dancing npc, or update the one you look at\n"
        "/{0} setdance <gesture> - change the gesture of the npc you look at\n"
        "/{0} setgear <gear set> - change the gear set of the npc you look at\n"
        "/{0} remove - remove the npc you look at\n"
        "/{0} clear - remove all of your npcs\n"
        "/{0} dances - list gestures\n"
        "/{0} gear - list gear sets"
    ),
}


def register_messages(plugin):
    plugin.server.lang.register_messages(MESSAGES, plugin, "en")
