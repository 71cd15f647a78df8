from django.contrib import admin

from tickets.models import Event, Order, Ticket, TicketType


class TicketTypeInline(admin.TabularInline):
    model = TicketType
    extra = 1


class TicketInline(admin.TabularInline):
    model = Ticket
    extra = 0
    fields = ["id", "ticket_type", "status", "scanned_at"]
    readonly_fields = ["id", "ticket_type", "scanned_at"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "location", "starts_at", "created_at"]
    search_fields = ["title", "location"]
    inlines = [TicketTypeInline]


@admin.register(TicketType)
class TicketTypeAdmin(admin.ModelAdmin):
    list_display = ["name", "event", "price", "quantity_sold", "quantity_available"]
    list_filter = ["event"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "user_id", "event", "total", "status", "created_at"]
    list_filter = ["status", "event"]
    inlines = [TicketInline]


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "ticket_type", "status", "created_at"]
    list_filter = ["status", "event"]
    search_fields = ["id", "user_id"]
