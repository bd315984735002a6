"""
Summary cache invalidation receivers.

Every write to a dated ledger row marks the month it lands in stale. An
update that moves a row to another month marks the old month as well.
Cascading deletes send ``pre_delete`` for each removed child row, so
deleting a vendor or customer invalidates every month it had activity in.
"""

from django.db.models.signals import post_save, pre_delete, pre_save
from django.dispatch import receiver

from apps.customers.models import Customer, CustomerPayment, CustomerTransaction
from apps.vendors.models import Vendor, VendorPayment, VendorTransaction
from .services import invalidate_month, invalidate_owner

# Path from each dated row to the user owning it
OWNER_LOOKUPS = {
    VendorTransaction: 'vendor__owner_id',
    VendorPayment: 'owner_id',
    CustomerTransaction: 'customer__owner_id',
    CustomerPayment: 'transaction__customer__owner_id',
}


def _stored_row(sender, pk):
    """``(date, owner_id)`` as currently stored, or None."""
    return sender.objects.filter(pk=pk).values_list('date', OWNER_LOOKUPS[sender]).first()


def _remember_previous_date(sender, instance, **kwargs):
    if instance._state.adding:
        return
    stored = _stored_row(sender, instance.pk)
    if stored is not None:
        instance._previous_ledger_row = stored


def _invalidate_saved_row(sender, instance, **kwargs):
    previous = getattr(instance, '_previous_ledger_row', None)
    if previous is not None:
        invalidate_month(owner_id=previous[1], day=previous[0])
        del instance._previous_ledger_row

    stored = _stored_row(sender, instance.pk)
    if stored is not None:
        invalidate_month(owner_id=stored[1], day=stored[0])


def _invalidate_deleted_row(sender, instance, **kwargs):
    stored = _stored_row(sender, instance.pk)
    if stored is not None:
        invalidate_month(owner_id=stored[1], day=stored[0])


for ledger_model in OWNER_LOOKUPS:
    uid = ledger_model.__name__
    pre_save.connect(_remember_previous_date, sender=ledger_model, dispatch_uid=f"summary_pre_save_{uid}")
    post_save.connect(_invalidate_saved_row, sender=ledger_model, dispatch_uid=f"summary_post_save_{uid}")
    pre_delete.connect(_invalidate_deleted_row, sender=ledger_model, dispatch_uid=f"summary_pre_delete_{uid}")


@receiver(pre_save, sender=Vendor, dispatch_uid='summary_vendor_rename')
@receiver(pre_save, sender=Customer, dispatch_uid='summary_customer_rename')
def invalidate_on_rename(sender, instance, **kwargs):
    """Leaderboards embed entity names, so a rename stales all of the owner's months."""
    if instance._state.adding:
        return
    previous_name = sender.objects.filter(pk=instance.pk).values_list('name', flat=True).first()
    if previous_name is not None and previous_name != instance.name:
        invalidate_owner(owner_id=instance.owner_id)
